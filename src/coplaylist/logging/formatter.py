"""JSON log formatter: one object per line, ready for log shippers."""

import contextvars
import json
import logging
from datetime import UTC, datetime
from typing import Any

from coplaylist.constants import SERVICE_NAME

request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("request_id", default=None)

# Attributes every LogRecord has; anything else was passed via ``extra=``.
_RESERVED = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


class JSONLogFormatter(logging.Formatter):
    """Render a record as a single JSON line.

    Output format::

        {"timestamp": "...", "level": "INFO", "service": "coplaylist",
         "logger": "coplaylist.leaderboard.service", "message": "...",
         "request_id": "...", "track_id": "..."}

    Fields given through ``extra=`` are copied to the top level. The request
    id comes from the record when set there, otherwise from ``request_id_var``.
    """

    def __init__(self, service: str = SERVICE_NAME) -> None:
        super().__init__()
        self._service = service

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "service": self._service,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({key: value for key, value in record.__dict__.items() if key not in _RESERVED})

        request_id = entry.get("request_id") or request_id_var.get()
        if request_id:
            entry["request_id"] = request_id
        else:
            entry.pop("request_id", None)

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            entry["stack"] = self.formatStack(record.stack_info)

        return json.dumps(entry, default=str)
