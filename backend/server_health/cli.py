"""
Server Health Report - command line entry point.

Usage:
    server-health-report <server_list.csv> <report.html>
"""
import argparse
import sys
from typing import List, Optional

from server_health.config import settings
from server_health.exceptions import HealthReportError
from server_health.logger import logger, set_level
from server_health.services.report_builder import ReportBuilder
from server_health.services.server_source import load_servers


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="server-health-report",
        description="Query servers for health signals and write an HTML report.",
    )
    parser.add_argument("server_list", help="CSV file with Name,Location,Description,Roles columns")
    parser.add_argument("output", help="Path of the HTML report to write (overwritten)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    set_level(settings.LOG_LEVEL)

    logger.info(f"Starting {settings.APP_NAME}...")
    try:
        servers = load_servers(args.server_list)
        ReportBuilder().write(servers, args.output)
    except HealthReportError as e:
        logger.error(f"Report generation failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
