"""Root logger configuration."""

import logging
import sys

from coplaylist.constants import SERVICE_NAME
from coplaylist.logging.formatter import JSONLogFormatter

# Libraries that log every request at INFO.
_NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: str = "INFO", service: str = SERVICE_NAME) -> None:
    """Send every log record to stdout as JSON; safe to call more than once."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONLogFormatter(service=service))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level.upper())
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
