"""
Application configuration using environment variables.
"""
import os
from dataclasses import dataclass
from dotenv import load_dotenv

# Load .env file
load_dotenv()

GIB = 1024 ** 3

PACKAGE_TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class Settings:
    """Application settings."""
    APP_NAME: str = "Server Health Report"
    REPORT_TITLE: str = os.getenv("REPORT_TITLE", "Server Health Report")
    TEMPLATE_DIR: str = os.getenv("TEMPLATE_DIR", PACKAGE_TEMPLATE_DIR)
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # WinRM settings
    WINRM_USERNAME: str = os.getenv("WINRM_USERNAME", "")
    WINRM_PASSWORD: str = os.getenv("WINRM_PASSWORD", "")
    WINRM_TRANSPORT: str = os.getenv("WINRM_TRANSPORT", "ntlm")
    WINRM_SCHEME: str = os.getenv("WINRM_SCHEME", "http")
    WINRM_PORT: int = int(os.getenv("WINRM_PORT", "5985"))
    WINRM_TIMEOUT: int = int(os.getenv("WINRM_TIMEOUT", "30"))
    WINRM_MAX_RETRIES: int = int(os.getenv("WINRM_MAX_RETRIES", "0"))

    # vCenter settings
    VCENTER_HOST: str = os.getenv("VCENTER_HOST", "")
    VCENTER_USERNAME: str = os.getenv("VCENTER_USERNAME", "")
    VCENTER_PASSWORD: str = os.getenv("VCENTER_PASSWORD", "")
    VCENTER_PORT: int = int(os.getenv("VCENTER_PORT", "443"))
    VCENTER_VERIFY_SSL: bool = _env_bool("VCENTER_VERIFY_SSL", "false")

    # Thresholds
    DISK_FREE_THRESHOLD_GB: int = int(os.getenv("DISK_FREE_THRESHOLD_GB", "10"))
    FILE_SIZE_THRESHOLD_GB: int = int(os.getenv("FILE_SIZE_THRESHOLD_GB", "5"))

    # File measured for servers tagged pi_local_db
    PI_LOCAL_DB_PATH: str = os.getenv(
        "PI_LOCAL_DB_PATH", r"C:\Program Files\PIPC\dat\pilocal.dat"
    )

    # Error policy: false aborts the run on the first failed check
    CONTINUE_ON_ERROR: bool = _env_bool("CONTINUE_ON_ERROR", "false")

    @property
    def disk_free_threshold_bytes(self) -> int:
        return self.DISK_FREE_THRESHOLD_GB * GIB

    @property
    def file_size_threshold_bytes(self) -> int:
        return self.FILE_SIZE_THRESHOLD_GB * GIB

settings = Settings()
