"""Structured Logging - JSON formatter and setup for access-layer observability.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (endpoint, channel, attempt, status_code...) surfaced when present
    - Bearer tokens are never passed to a logger, so they never reach a handler
    - JSON format in production, human-readable in development

Design Decisions:
    - JSONFormatter on stdlib logging: no extra dependency for the host app to configure
    - setup_logging called once by open_access_layer(); idempotent per handler type
"""

import logging
import json
from datetime import datetime, timezone

_EXTRA_FIELDS = (
    "endpoint", "method", "channel", "attempt", "max_attempts",
    "status_code", "error_kind", "error_code", "delay_ms", "url",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

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
    """Configure the `trilingo_access` logger hierarchy. Returns the installed handler."""
    root = logging.getLogger("trilingo_access")
    for existing in list(root.handlers):
        if getattr(existing, "_trilingo_handler", False):
            root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler._trilingo_handler = True  # type: ignore[attr-defined]
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
