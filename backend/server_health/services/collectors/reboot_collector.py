"""
Reboot Collector - Pending reboot state from the registry.

Sources:
- Component Based Servicing RebootPending key
- Windows Update RebootRequired key
- Session Manager PendingFileRenameOperations value
"""
from typing import Callable

from server_health.exceptions import RemoteQueryError
from server_health.schemas.check_result import REBOOT_COLUMNS, CheckTable, RebootRow
from server_health.schemas.server import ServerRecord
from server_health.services.winrm_client import WinRMClient

REBOOT_QUERY = "; ".join([
    r"$cbs = Test-Path 'HKLM:\SOFTWARE\Microsoft\Windows\CurrentVersion\Component Based Servicing\RebootPending'",
    r"$wua = Test-Path 'HKLM:\SOFTWARE\Microsoft\Windows\CurrentVersion\WindowsUpdate\Auto Update\RebootRequired'",
    r"$pfro = $null -ne (Get-ItemProperty 'HKLM:\SYSTEM\CurrentControlSet\Control\Session Manager' "
    r"-Name PendingFileRenameOperations -ErrorAction SilentlyContinue)",
    "[pscustomobject]@{ Computer = $env:COMPUTERNAME; CBServicing = $cbs; "
    "WindowsUpdate = $wua; PendingFileRename = $pfro }",
])


class RebootCollector:
    """Single-row report of whether the server waits for a reboot."""

    title = "Pending Reboot"

    def __init__(self, client_factory: Callable[[str], WinRMClient] = WinRMClient):
        self.client_factory = client_factory

    def collect(self, server: ServerRecord) -> CheckTable:
        client = self.client_factory(server.name)
        results = client.query_json(REBOOT_QUERY)
        if not results:
            raise RemoteQueryError(server.name, "No pending reboot data returned")

        data = results[0]
        cbs = bool(data.get("CBServicing"))
        wua = bool(data.get("WindowsUpdate"))
        pfro = bool(data.get("PendingFileRename"))
        pending = cbs or wua or pfro

        row = RebootRow(
            computer=data.get("Computer") or server.name,
            cbs_pending=cbs,
            windows_update_pending=wua,
            file_rename_pending=pfro,
            reboot_pending=pending,
            danger=pending,
        )
        return CheckTable(self.title, REBOOT_COLUMNS, [row])
