"""
File Size Collector - Length of one file on a server.
"""
from typing import Callable, Optional

from server_health.config import settings
from server_health.exceptions import RemoteQueryError
from server_health.schemas.check_result import FILE_SIZE_COLUMNS, CheckTable, FileSizeRow
from server_health.schemas.server import ServerRecord
from server_health.services.winrm_client import WinRMClient


class FileSizeCollector:
    """Flags a file that has grown past the threshold."""

    def __init__(
        self,
        path: str,
        threshold_bytes: Optional[int] = None,
        title: str = "File Size",
        client_factory: Callable[[str], WinRMClient] = WinRMClient,
    ):
        if threshold_bytes is None:
            threshold_bytes = settings.file_size_threshold_bytes
        self.path = path
        self.threshold_bytes = threshold_bytes
        self.title = title
        self.client_factory = client_factory

    def query(self) -> str:
        literal = self.path.replace("'", "''")
        return (
            f"Get-Item -LiteralPath '{literal}' -ErrorAction Stop | "
            "Select-Object FullName, Length, "
            "@{n='LastWriteTime';e={$_.LastWriteTime.ToString('yyyy-MM-dd HH:mm:ss')}}"
        )

    def collect(self, server: ServerRecord) -> CheckTable:
        client = self.client_factory(server.name)
        items = client.query_json(self.query())
        if not items:
            raise RemoteQueryError(server.name, f"File not found: {self.path}")

        item = items[0]
        length = int(item.get("Length") or 0)
        row = FileSizeRow(
            path=item.get("FullName") or self.path,
            length_bytes=length,
            last_write_time=item.get("LastWriteTime") or "",
            danger=length > self.threshold_bytes,
        )
        return CheckTable(self.title, FILE_SIZE_COLUMNS, [row])
