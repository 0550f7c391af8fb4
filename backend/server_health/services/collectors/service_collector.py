"""
Service Collector - State of Windows services matching a display name prefix.
"""
from typing import Callable

from server_health.logger import logger
from server_health.schemas.check_result import SERVICE_COLUMNS, CheckTable, ServiceRow
from server_health.schemas.server import ServerRecord
from server_health.services.winrm_client import WinRMClient


def is_service_danger(start_mode: str, state: str) -> bool:
    """An automatic service that is not running needs attention."""
    return (start_mode or "").lower() == "auto" and (state or "").lower() != "running"


class ServiceCollector:
    """Lists services whose display name starts with `prefix`."""

    def __init__(
        self,
        prefix: str,
        title: str = "",
        client_factory: Callable[[str], WinRMClient] = WinRMClient,
    ):
        self.prefix = prefix
        self.title = title or f"{prefix} Services"
        self.client_factory = client_factory

    def query(self) -> str:
        like = self.prefix.replace("'", "''")
        return (
            "Get-CimInstance Win32_Service | "
            f"Where-Object {{ $_.DisplayName -like '{like}*' }} | "
            "Select-Object Name, DisplayName, StartMode, State"
        )

    def collect(self, server: ServerRecord) -> CheckTable:
        client = self.client_factory(server.name)
        services = client.query_json(self.query())

        prefix = self.prefix.lower()
        rows = []
        for svc in services:
            display_name = svc.get("DisplayName") or ""
            if not display_name.lower().startswith(prefix):
                continue
            start_mode = svc.get("StartMode") or ""
            state = svc.get("State") or ""
            rows.append(ServiceRow(
                name=svc.get("Name") or "",
                display_name=display_name,
                start_mode=start_mode,
                state=state,
                danger=is_service_danger(start_mode, state),
            ))

        rows.sort(key=lambda r: r.display_name.lower())
        logger.debug(f"{server.name}: {len(rows)} service(s) matching '{self.prefix}'")
        return CheckTable(self.title, SERVICE_COLUMNS, rows)
