"""
Report Renderer - Turn check tables into HTML fragments.

Fragments nest in three levels:
    table.html  one check
    group.html  one server (its tables)
    main.html   the whole report (all groups)

Fragment templates may use only four values: title, content, date and
group_id. Content is an already rendered fragment and is inserted as is;
everything else is escaped. Any other name is an error (StrictUndefined),
so a typo in a custom TEMPLATE_DIR fails the run instead of vanishing.
Text outside the placeholders is copied unchanged, except Jinja2 syntax
itself: {# ... #} comments and {% ... %} tags are still interpreted.
"""
from typing import Iterable, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined
from markupsafe import Markup

from server_health.config import settings
from server_health.logger import logger
from server_health.schemas.check_result import CheckTable

TABLE_TEMPLATE = "table.html"
GROUP_TEMPLATE = "group.html"
MAIN_TEMPLATE = "main.html"
DATA_TABLE_TEMPLATE = "data_table.html"
INDEX_TEMPLATE = "index.html"

DANGER_CLASS = "danger"


class ReportRenderer:
    """Render check results through Jinja2 templates."""

    def __init__(self, template_dir: Optional[str] = None, loader=None):
        self.template_dir = template_dir or settings.TEMPLATE_DIR
        self.env = Environment(
            loader=loader or FileSystemLoader(self.template_dir),
            autoescape=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    def render_table(self, table: CheckTable) -> Markup:
        """Render a row set as an HTML table.

        Rows flagged as danger get the highlight class. An empty row set
        yields the header row and an empty body.
        """
        template = self.env.get_template(DATA_TABLE_TEMPLATE)
        return Markup(template.render(
            columns=table.columns,
            rows=table.rows,
            danger_class=DANGER_CLASS,
        ))

    def render_fragment(
        self,
        template_name: str,
        *,
        title: str = "",
        content: str = "",
        date: str = "",
        group_id: str = "",
    ) -> Markup:
        """Substitute the four fragment placeholders into a template."""
        template = self.env.get_template(template_name)
        return Markup(template.render(
            title=title,
            content=Markup(content),
            date=date,
            group_id=group_id,
        ))

    def render_check(self, table: CheckTable, group_id: str = "") -> Markup:
        """Render one check as a titled table fragment."""
        return self.render_fragment(
            TABLE_TEMPLATE,
            title=table.title,
            content=self.render_table(table),
            group_id=group_id,
        )

    def render_index(self, groups: Iterable[dict]) -> Markup:
        """Render the list of links to each server group.

        Each group is a dict with group_id, title and danger_count.
        """
        template = self.env.get_template(INDEX_TEMPLATE)
        return Markup(template.render(groups=list(groups)))

    def render_document(self, title: str, content: str, date: str) -> str:
        html = self.render_fragment(MAIN_TEMPLATE, title=title, content=content, date=date)
        logger.debug(f"Rendered report document ({len(html)} chars)")
        return str(html)
