"""
Disk Collector - Free space on fixed disks.
"""
from typing import Callable, Optional

from server_health.config import settings
from server_health.logger import logger
from server_health.schemas.check_result import DISK_COLUMNS, CheckTable, DiskRow
from server_health.schemas.server import ServerRecord
from server_health.services.winrm_client import WinRMClient

DISK_QUERY = (
    "Get-CimInstance Win32_LogicalDisk -Filter 'DriveType=3' | "
    "Select-Object DeviceID, VolumeName, Size, FreeSpace"
)


def _to_int(value) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


class DiskCollector:
    """Reports every fixed disk; low free space is dangerous."""

    title = "Disk Space"

    def __init__(
        self,
        threshold_bytes: Optional[int] = None,
        client_factory: Callable[[str], WinRMClient] = WinRMClient,
    ):
        if threshold_bytes is None:
            threshold_bytes = settings.disk_free_threshold_bytes
        self.threshold_bytes = threshold_bytes
        self.client_factory = client_factory

    def is_danger(self, free_bytes: Optional[int]) -> bool:
        # Unknown free space (e.g. unformatted volume) is not flagged
        return free_bytes is not None and free_bytes < self.threshold_bytes

    def collect(self, server: ServerRecord) -> CheckTable:
        client = self.client_factory(server.name)
        disks = client.query_json(DISK_QUERY)

        rows = []
        for disk in disks:
            free = _to_int(disk.get("FreeSpace"))
            rows.append(DiskRow(
                device_id=disk.get("DeviceID") or "",
                volume_name=disk.get("VolumeName") or "",
                size_bytes=_to_int(disk.get("Size")),
                free_bytes=free,
                danger=self.is_danger(free),
            ))

        logger.debug(f"{server.name}: {len(rows)} disk(s)")
        return CheckTable(self.title, DISK_COLUMNS, rows)
