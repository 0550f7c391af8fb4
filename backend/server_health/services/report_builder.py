"""
Report Builder - Main orchestrator for a health report run.

For every server, runs the checks its role tags select (in the fixed
order of ROLE_CHECKS), renders each result table, wraps them in a
server group, and composes all groups into one document.
"""
import os
import re
from dataclasses import dataclass
from datetime import datetime
from functools import partial
from typing import Any, Callable, List, Optional, Sequence

from markupsafe import Markup

from server_health.config import Settings, settings as default_settings
from server_health.exceptions import CheckFailedError, ReportWriteError
from server_health.logger import logger
from server_health.schemas.check_result import ERROR_COLUMNS, CheckTable, ErrorRow
from server_health.schemas.server import ServerRecord
from server_health.services.collectors.alert_collector import AlertCollector
from server_health.services.collectors.disk_collector import DiskCollector
from server_health.services.collectors.file_size_collector import FileSizeCollector
from server_health.services.collectors.reboot_collector import RebootCollector
from server_health.services.collectors.service_collector import ServiceCollector
from server_health.services.report_renderer import GROUP_TEMPLATE, ReportRenderer
from server_health.services.vcenter_session import VCenterSession
from server_health.services.winrm_client import WinRMClient

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class RoleCheck:
    """A check selected by a role tag."""
    role: str
    name: str
    factory: Callable[[Settings], Any]


def _winrm(cfg: Settings):
    return partial(WinRMClient, config=cfg)


# Order here is the order checks appear in each server group
ROLE_CHECKS: List[RoleCheck] = [
    RoleCheck("windows", "disk_space",
              lambda cfg: DiskCollector(cfg.disk_free_threshold_bytes, _winrm(cfg))),
    RoleCheck("windows", "pending_reboot",
              lambda cfg: RebootCollector(_winrm(cfg))),
    RoleCheck("vmware_services", "vmware_services",
              lambda cfg: ServiceCollector("VMware", "VMware Services", _winrm(cfg))),
    RoleCheck("mssql_services", "mssql_services",
              lambda cfg: ServiceCollector("SQL Server", "SQL Server Services", _winrm(cfg))),
    RoleCheck("mstmg_services", "mstmg_services",
              lambda cfg: ServiceCollector("Microsoft Forefront TMG", "Forefront TMG Services", _winrm(cfg))),
    RoleCheck("surfcop_services", "surfcop_services",
              lambda cfg: ServiceCollector("SurfCop", "SurfCop Services", _winrm(cfg))),
    RoleCheck("pi_local_db", "pi_local_db",
              lambda cfg: FileSizeCollector(cfg.PI_LOCAL_DB_PATH,
                                            cfg.file_size_threshold_bytes,
                                            "PI Local Database",
                                            _winrm(cfg))),
    RoleCheck("vcenter_alerts", "vcenter_alerts",
              lambda cfg: AlertCollector(partial(VCenterSession, config=cfg))),
]


def slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "server"


class ReportBuilder:
    """Runs checks for a list of servers and composes the HTML report."""

    def __init__(
        self,
        config: Optional[Settings] = None,
        renderer: Optional[ReportRenderer] = None,
        checks: Sequence[RoleCheck] = ROLE_CHECKS,
    ):
        self.config = config or default_settings
        self.renderer = renderer or ReportRenderer(self.config.TEMPLATE_DIR)
        self.continue_on_error = self.config.CONTINUE_ON_ERROR
        self.checks = [(check, check.factory(self.config)) for check in checks]

    def run_checks(self, server: ServerRecord) -> List[CheckTable]:
        """Run every check the server's roles select, in order."""
        tables = []
        for check, collector in self.checks:
            if not server.has_role(check.role):
                continue
            tables.append(self._run_check(server, check, collector))
        return tables

    def _run_check(self, server: ServerRecord, check: RoleCheck, collector) -> CheckTable:
        logger.info(f"{server.name}: running {check.name}")
        try:
            table = collector.collect(server)
        except Exception as e:
            if not self.continue_on_error:
                logger.exception(f"{server.name}: {check.name} failed, aborting report")
                raise CheckFailedError(server.name, check.name, e) from e
            logger.warning(f"{server.name}: {check.name} failed: {e}")
            title = getattr(collector, "title", check.name)
            return CheckTable(title, ERROR_COLUMNS, [ErrorRow(check.name, str(e))])

        if table.danger_count:
            logger.info(f"{server.name}: {check.name} flagged {table.danger_count} row(s)")
        return table

    def _group_title(self, server: ServerRecord) -> str:
        parts = [server.name, server.location, server.description]
        return " - ".join(p for p in parts if p)

    def build(self, servers: Sequence[ServerRecord], now: Optional[datetime] = None) -> str:
        """Run all checks and return the complete HTML document.

        Raises:
            CheckFailedError: a check failed and CONTINUE_ON_ERROR is off
        """
        now = now or datetime.now()
        groups = []
        index = []
        used_ids = set()

        for server in servers:
            logger.info(f"Checking {server.name} (roles: {', '.join(sorted(server.roles)) or 'none'})")
            group_id = slugify(server.name)
            suffix = 2
            while group_id in used_ids:
                group_id = f"{slugify(server.name)}-{suffix}"
                suffix += 1
            used_ids.add(group_id)

            tables = self.run_checks(server)
            fragments = Markup("").join(
                self.renderer.render_check(table, group_id) for table in tables
            )
            title = self._group_title(server)
            groups.append(self.renderer.render_fragment(
                GROUP_TEMPLATE, title=title, content=fragments, group_id=group_id
            ))
            index.append({
                "group_id": group_id,
                "title": title,
                "danger_count": sum(t.danger_count for t in tables),
            })

        content = self.renderer.render_index(index) + Markup("").join(groups)
        return self.renderer.render_document(
            self.config.REPORT_TITLE, content, now.strftime(DATE_FORMAT)
        )

    def write(self, servers: Sequence[ServerRecord], path: str) -> str:
        """Build the report and write it to `path`, replacing any existing file.

        Raises:
            CheckFailedError: a check failed and CONTINUE_ON_ERROR is off
            ReportWriteError: the file or its directory could not be created
        """
        html = self.build(servers)

        directory = os.path.dirname(os.path.abspath(path))
        try:
            os.makedirs(directory, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(html)
        except OSError as e:
            raise ReportWriteError(f"Cannot write report {path}: {e}") from e

        logger.info(f"Wrote report for {len(servers)} server(s) to {path}")
        return path
