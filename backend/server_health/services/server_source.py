"""
Server Source - Read the list of servers to check from a CSV file.

Expected header: Name,Location,Description,Roles
"""
import csv
from typing import List

from pydantic import ValidationError

from server_health.exceptions import ServerListError
from server_health.logger import logger
from server_health.schemas.server import ServerRecord

REQUIRED_COLUMNS = ("name", "location", "description", "roles")


def load_servers(path: str) -> List[ServerRecord]:
    """Parse the server list.

    Args:
        path: CSV file with one server per row

    Returns:
        Servers in file order

    Raises:
        ServerListError: file missing, not UTF-8, malformed CSV or lacking a
            required column
    """
    try:
        with open(path, newline="", encoding="utf-8-sig") as f:
            reader = csv.DictReader(f)
            if reader.fieldnames is None:
                raise ServerListError(f"Server list {path} is empty")

            # Map lowercased header -> actual header
            header = {name.strip().lower(): name for name in reader.fieldnames if name}
            missing = [c for c in REQUIRED_COLUMNS if c not in header]
            if missing:
                raise ServerListError(
                    f"Server list {path} is missing column(s): {', '.join(missing)}"
                )

            servers = []
            for line_no, row in enumerate(reader, start=2):
                values = {c: (row.get(header[c]) or "").strip() for c in REQUIRED_COLUMNS}
                if not values["name"]:
                    logger.warning(f"Skipping line {line_no} of {path}: no server name")
                    continue
                try:
                    servers.append(ServerRecord(**values))
                except ValidationError as e:
                    raise ServerListError(f"Invalid entry on line {line_no} of {path}: {e}") from e

    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise ServerListError(f"Cannot read server list {path}: {e}") from e

    logger.info(f"Loaded {len(servers)} server(s) from {path}")
    return servers
