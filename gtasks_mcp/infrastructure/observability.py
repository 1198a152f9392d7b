"""Structured Logging — JSON formatter and setup for both transports.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (operation, error_code, error_category, transport,
      client_ip, duration_ms) surfaced when present
    - Handlers write to stderr: stdout belongs to the stdio MCP transport

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - setup_logging is idempotent: the handler it installs is replaced, not duplicated
"""

import json
import logging
import sys
from datetime import datetime, timezone

_EXTRA_FIELDS = (
    "operation", "error_code", "error_category", "transport", "client_ip",
    "duration_ms",
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
        return json.dumps(log, ensure_ascii=False)


class _StderrHandler(logging.StreamHandler):
    """Marker type so repeated setup_logging calls replace the handler."""


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Configure root logging on stderr."""
    handler = _StderrHandler(sys.stderr)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    for existing in list(logging.root.handlers):
        if isinstance(existing, _StderrHandler):
            logging.root.removeHandler(existing)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
