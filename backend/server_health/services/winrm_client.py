"""
WinRM Client - Run PowerShell on a remote Windows server.

Every check against a Windows server goes through one call of `run_ps`.
Transport errors are retried with exponential backoff; a script that
runs but fails (non-zero exit) is not retried.
"""
import json
import time
from typing import Any, Dict, List, Optional

import winrm
from requests.exceptions import RequestException
from winrm.exceptions import WinRMError, WinRMTransportError

from server_health.config import Settings, settings as default_settings
from server_health.exceptions import RemoteQueryError
from server_health.logger import logger

# PowerShell writes stdout in the OEM code page unless told otherwise
UTF8_OUTPUT = "[Console]::OutputEncoding = [Text.Encoding]::UTF8; "


class WinRMClient:
    """PowerShell runner for a single host."""

    def __init__(self, host: str, config: Optional[Settings] = None):
        self.host = host
        self.config = config or default_settings
        self.endpoint = f"{self.config.WINRM_SCHEME}://{host}:{self.config.WINRM_PORT}/wsman"
        self.max_retries = self.config.WINRM_MAX_RETRIES
        self._session: Optional[winrm.Session] = None

    @property
    def session(self) -> winrm.Session:
        if self._session is None:
            self._session = winrm.Session(
                self.endpoint,
                auth=(self.config.WINRM_USERNAME, self.config.WINRM_PASSWORD),
                transport=self.config.WINRM_TRANSPORT,
                server_cert_validation="ignore",
                read_timeout_sec=self.config.WINRM_TIMEOUT + 10,
                operation_timeout_sec=self.config.WINRM_TIMEOUT,
            )
        return self._session

    def run_ps(self, script: str) -> str:
        """Run a PowerShell snippet and return its stdout.

        Raises:
            RemoteQueryError: host unreachable, auth failure, or non-zero exit
        """
        for attempt in range(self.max_retries + 1):
            try:
                result = self.session.run_ps(script)
                break
            except (WinRMTransportError, RequestException) as e:
                if attempt < self.max_retries:
                    logger.warning(f"{self.host}: WinRM error, retrying (attempt {attempt + 1}): {e}")
                    time.sleep(2 ** attempt)
                    continue
                raise RemoteQueryError(self.host, f"WinRM unreachable: {e}") from e
            except WinRMError as e:
                raise RemoteQueryError(self.host, f"WinRM error: {e}") from e

        stdout = result.std_out.decode("utf-8", errors="replace")
        if result.status_code != 0:
            stderr = result.std_err.decode("utf-8", errors="replace").strip()
            raise RemoteQueryError(
                self.host,
                f"PowerShell exited with {result.status_code}: {stderr or stdout.strip()}"
            )
        return stdout

    def query_json(self, script: str) -> List[Dict[str, Any]]:
        """Run a pipeline and decode its objects.

        PowerShell serializes a single object without the surrounding
        array, so the result is always normalized to a list. Output is
        forced to UTF-8 so non-ASCII names survive the decode in `run_ps`.
        """
        output = self.run_ps(f"{UTF8_OUTPUT}{script} | ConvertTo-Json -Compress -Depth 3").strip()
        if not output:
            return []
        try:
            data = json.loads(output)
        except json.JSONDecodeError as e:
            raise RemoteQueryError(self.host, f"Unparseable PowerShell output: {e}") from e
        if isinstance(data, dict):
            return [data]
        return list(data)
