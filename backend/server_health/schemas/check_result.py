"""
Check result rows and the table container every collector returns.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

from server_health.config import GIB


def format_gib(value: Optional[int]) -> str:
    """Render a byte count as GiB with two decimals."""
    if value is None:
        return ""
    return f"{value / GIB:.2f} GB"


def format_bool(value: Optional[bool]) -> str:
    if value is None:
        return ""
    return "Yes" if value else "No"


@dataclass
class DiskRow:
    """Fixed disk on a Windows server."""
    device_id: str
    volume_name: str
    size_bytes: Optional[int]
    free_bytes: Optional[int]
    danger: bool = False


@dataclass
class RebootRow:
    """Pending reboot state of a Windows server."""
    computer: str
    cbs_pending: bool
    windows_update_pending: bool
    file_rename_pending: bool
    reboot_pending: bool
    danger: bool = False


@dataclass
class ServiceRow:
    """Windows service state."""
    name: str
    display_name: str
    start_mode: str
    state: str
    danger: bool = False


@dataclass
class FileSizeRow:
    """Size of a single file on a server."""
    path: str
    length_bytes: int
    last_write_time: str = ""
    danger: bool = False


@dataclass
class AlertRow:
    """Triggered vCenter alarm."""
    datacenter: str
    alarm: str
    entity: str
    triggered_at: str
    acknowledged: bool
    danger: bool = False


@dataclass
class ErrorRow:
    """Stands in for a check that could not be run."""
    check: str
    error: str
    danger: bool = True


@dataclass
class Column:
    """A displayed column of a check table."""
    key: str
    header: str
    formatter: Optional[Callable[[Any], str]] = None

    def cell(self, row: Any) -> str:
        value = getattr(row, self.key, None)
        if self.formatter is not None:
            return self.formatter(value)
        return "" if value is None else str(value)


@dataclass
class CheckTable:
    """Normalized row set produced by one check."""
    title: str
    columns: List[Column]
    rows: List[Any] = field(default_factory=list)

    @property
    def danger_count(self) -> int:
        return sum(1 for row in self.rows if row.danger)


DISK_COLUMNS = [
    Column("device_id", "Drive"),
    Column("volume_name", "Volume"),
    Column("size_bytes", "Size", format_gib),
    Column("free_bytes", "Free Space", format_gib),
]

REBOOT_COLUMNS = [
    Column("computer", "Computer"),
    Column("cbs_pending", "CBS", format_bool),
    Column("windows_update_pending", "Windows Update", format_bool),
    Column("file_rename_pending", "Pending File Rename", format_bool),
    Column("reboot_pending", "Reboot Pending", format_bool),
]

SERVICE_COLUMNS = [
    Column("display_name", "Display Name"),
    Column("name", "Name"),
    Column("start_mode", "Start Mode"),
    Column("state", "State"),
]

FILE_SIZE_COLUMNS = [
    Column("path", "File"),
    Column("length_bytes", "Size", format_gib),
    Column("last_write_time", "Last Modified"),
]

ALERT_COLUMNS = [
    Column("datacenter", "Datacenter"),
    Column("alarm", "Alarm"),
    Column("entity", "Object"),
    Column("triggered_at", "Time"),
    Column("acknowledged", "Acknowledged", format_bool),
]

ERROR_COLUMNS = [
    Column("check", "Check"),
    Column("error", "Error"),
]
