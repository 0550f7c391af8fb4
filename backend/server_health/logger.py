"""
Logging configuration.

Progress messages go to stdout, warnings and errors to stderr, so a
scheduled run can mail only what went wrong.
"""
import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# pywinrm logs every HTTP request through requests/urllib3
NOISY_LOGGERS = ("urllib3", "requests_ntlm", "winrm")

logger = logging.getLogger("server_health")
logger.setLevel(logging.INFO)

formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

console_handler = logging.StreamHandler(sys.stdout)
console_handler.setLevel(logging.INFO)
console_handler.addFilter(lambda record: record.levelno < logging.WARNING)
console_handler.setFormatter(formatter)

error_handler = logging.StreamHandler(sys.stderr)
error_handler.setLevel(logging.WARNING)
error_handler.setFormatter(formatter)

if not logger.handlers:
    logger.addHandler(console_handler)
    logger.addHandler(error_handler)

for name in NOISY_LOGGERS:
    logging.getLogger(name).setLevel(logging.WARNING)


def set_level(level: str) -> int:
    """Apply a level name such as "DEBUG" to the logger and the stdout handler.

    Unknown names fall back to INFO. Returns the numeric level applied.
    """
    value = logging.getLevelName(str(level).strip().upper())
    if not isinstance(value, int):
        logger.warning(f"Unknown LOG_LEVEL {level!r}, using INFO")
        value = logging.INFO

    logger.setLevel(value)
    console_handler.setLevel(value)
    return value
