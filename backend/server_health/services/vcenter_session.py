"""
vCenter Session - Short-lived pyVmomi connection.

A session is opened for one alert check and closed right after.
"""
import ssl
from typing import Optional

from pyVim.connect import Disconnect, SmartConnect
from pyVmomi import vim

from server_health.config import Settings, settings as default_settings
from server_health.exceptions import RemoteQueryError
from server_health.logger import logger


class VCenterSession:
    """Context manager yielding the vCenter service content."""

    def __init__(self, host: Optional[str] = None, config: Optional[Settings] = None):
        self.config = config or default_settings
        self.host = host or self.config.VCENTER_HOST
        self._si = None

    def __enter__(self) -> vim.ServiceInstanceContent:
        if not self.host:
            raise RemoteQueryError("vcenter", "VCENTER_HOST is not configured")

        ssl_context = None
        if not self.config.VCENTER_VERIFY_SSL:
            ssl_context = ssl._create_unverified_context()

        try:
            self._si = SmartConnect(
                host=self.host,
                user=self.config.VCENTER_USERNAME,
                pwd=self.config.VCENTER_PASSWORD,
                port=self.config.VCENTER_PORT,
                sslContext=ssl_context,
            )
        except (vim.fault.InvalidLogin, vim.fault.NotAuthenticated) as e:
            raise RemoteQueryError(self.host, f"vCenter login failed: {e.msg}") from e
        except (OSError, vim.fault.VimFault) as e:
            raise RemoteQueryError(self.host, f"vCenter unreachable: {e}") from e

        logger.debug(f"Connected to vCenter {self.host}")
        return self._si.RetrieveContent()

    def __exit__(self, exc_type, exc, tb):
        if self._si is not None:
            try:
                Disconnect(self._si)
            except Exception as e:
                logger.warning(f"Failed to disconnect from vCenter {self.host}: {e}")
            self._si = None
        return False
