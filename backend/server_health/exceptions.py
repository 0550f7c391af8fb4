"""
Exception types raised while building a report.
"""


class HealthReportError(Exception):
    """Base class for report generation errors."""


class ServerListError(HealthReportError):
    """The server list could not be read."""


class RemoteQueryError(HealthReportError):
    """A remote query against a server or vCenter failed."""

    def __init__(self, host: str, message: str):
        self.host = host
        self.message = message
        super().__init__(f"{host}: {message}")


class CheckFailedError(HealthReportError):
    """A check failed and the run is configured to stop."""

    def __init__(self, server: str, check: str, cause: Exception):
        self.server = server
        self.check = check
        self.cause = cause
        super().__init__(f"Check '{check}' failed for {server}: {cause}")


class ReportWriteError(HealthReportError):
    """The report file could not be written."""
