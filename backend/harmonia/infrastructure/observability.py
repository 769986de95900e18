"""Structured Logging — JSON formatter, setup, and the fault log sink.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (error_code, path, stage, database) surfaced when present
    - JSON format in production, human-readable in development
    - FaultLog.log() has no return contract (stdlib logging swallows handler errors)

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - setup_logging called once by the orchestrator before any stage runs
    - FaultLog uses its own logger ("harmonia.faults") so traces can be routed to
      a rotating file without duplicating them on stdout
"""

import logging
import json
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler

FAULT_LOGGER_NAME = "harmonia.faults"


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in ("error_code", "path", "stage", "database", "profile"):
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))


class FaultLog:
    """Persists diagnostic traces of runtime faults. Fire-and-forget."""

    def __init__(self, path: str | None = None, max_bytes: int = 5_000_000):
        self._logger = logging.getLogger(FAULT_LOGGER_NAME)
        if path and not any(
            isinstance(h, RotatingFileHandler) and h.baseFilename.endswith(path)
            for h in self._logger.handlers
        ):
            handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=3)
            handler.setFormatter(JSONFormatter())
            self._logger.addHandler(handler)

    def log(self, trace_text: str) -> None:
        self._logger.error(trace_text)
