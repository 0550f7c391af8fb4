"""
Alert Collector - Triggered alarms on every datacenter of a vCenter.
"""
from typing import Callable

from pyVmomi import vim

from server_health.logger import logger
from server_health.schemas.check_result import ALERT_COLUMNS, AlertRow, CheckTable
from server_health.schemas.server import ServerRecord
from server_health.services.vcenter_session import VCenterSession


def _format_time(value) -> str:
    if value is None:
        return ""
    if hasattr(value, "strftime"):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    return str(value)


class AlertCollector:
    """Lists vCenter alarms; rows are informational and never flagged."""

    title = "vCenter Alerts"

    def __init__(self, session_factory: Callable[[str], VCenterSession] = VCenterSession):
        self.session_factory = session_factory

    def collect(self, server: ServerRecord) -> CheckTable:
        rows = []
        with self.session_factory(server.name) as content:
            view = content.viewManager.CreateContainerView(
                content.rootFolder, [vim.Datacenter], True
            )
            try:
                for datacenter in view.view:
                    for state in datacenter.triggeredAlarmState or []:
                        rows.append(AlertRow(
                            datacenter=datacenter.name,
                            alarm=state.alarm.info.name,
                            entity=state.entity.name,
                            triggered_at=_format_time(state.time),
                            acknowledged=bool(state.acknowledged),
                        ))
            finally:
                view.Destroy()

        logger.debug(f"{server.name}: {len(rows)} triggered alarm(s)")
        return CheckTable(self.title, ALERT_COLUMNS, rows)
