"""Structured Logging: JSON and text formatters plus one-shot setup.

Invariants:
    - Every record carries timestamp, level, logger name and message
    - Composite-pipeline extras (cache_key, view, requested/found, ...) are
      emitted by both formatters when present, and only those keys
    - setup_logging is idempotent: re-running it replaces its own handler

Design Decisions:
    - Timestamps come from record.created, not from format time
    - PIL's plugin loader is chatty at DEBUG; it is pinned to WARNING
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_FIELDS = (
    "cache_key", "view", "requested", "found", "layer_index",
    "error_code", "path", "duration_ms", "cache_tier",
)
QUIET_LOGGERS = ("PIL",)
_HANDLER_NAME = "sandwich"


def extract_extras(record: logging.LogRecord) -> dict:
    """Known extra fields set on the record, in EXTRA_FIELDS order."""
    return {
        key: record.__dict__[key]
        for key in EXTRA_FIELDS
        if record.__dict__.get(key) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **extract_extras(record),
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable lines with extras appended as key=value."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = extract_extras(record)
        if not extras:
            return line
        pairs = " ".join(f"{k}={v}" for k, v in extras.items())
        return f"{line} [{pairs}]"


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the application handler on the root logger."""
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
