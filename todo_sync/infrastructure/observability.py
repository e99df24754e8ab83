"""Structured Logging: JSON formatter and setup for sync observability.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (intent, item_id, error_code, attempt) surfaced when present
    - JSON format by default, human-readable when log_format != "json"

Design Decisions:
    - Formatter on stdlib logging: callers only ever use logging.getLogger(__name__)
      plus extra={...}, no logging dependency leaks into core
    - setup_logging called once by the process that embeds the client
      (or by the reference store's lifespan)
"""

import json
import logging
from datetime import datetime, timezone


_EXTRA_FIELDS = (
    "intent", "item_id", "op_id", "error_code", "attempt",
    "status_code", "method", "path",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Configure root logging. Returns the installed handler."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
