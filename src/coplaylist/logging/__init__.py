"""Structured logging — JSON formatter, request-id context and setup."""

from coplaylist.logging.formatter import JSONLogFormatter, request_id_var
from coplaylist.logging.setup import configure_logging

__all__ = ["JSONLogFormatter", "configure_logging", "request_id_var"]
