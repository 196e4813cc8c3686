"""Structured logging utilities with JSON output."""

from __future__ import annotations

import json
import logging
import sys
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional

DEFAULT_FIELDS = {"run_id", "component", "species_id", "duration_ms", "status", "error", "n_samples", "source", "nll", "stage", "component_name"}


class JSONFormatter(logging.Formatter):
    """JSON formatter adding common contextual fields when present."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in DEFAULT_FIELDS:
            if hasattr(record, field):
                payload[field] = getattr(record, field)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class _ContextFilter(logging.Filter):
    def __init__(self, run_id: Optional[str] = None, component: Optional[str] = None) -> None:
        super().__init__()
        self.run_id = run_id
        self.component = component

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if self.run_id and not hasattr(record, "run_id"):
            record.run_id = self.run_id
        if self.component and not hasattr(record, "component"):
            record.component = self.component
        return True


def configure_logging(run_id: Optional[str] = None, component: Optional[str] = None, level: int = logging.INFO) -> None:
    """Configure root logger with structured JSON output on stderr.

    Embeds run_id/component defaults so downstream loggers inherit context without
    requiring every call to pass `extra`.
    """

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(_ContextFilter(run_id=run_id, component=component))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(handler)


def get_logger(name: str, run_id: Optional[str] = None, component: Optional[str] = None) -> logging.Logger:
    """Convenience helper to fetch a logger with optional context defaults."""

    logger = logging.getLogger(name)
    if (run_id or component) and not any(isinstance(f, _ContextFilter) for f in logger.filters):
        logger.addFilter(_ContextFilter(run_id=run_id, component=component))
    return logger


@contextmanager
def log_duration(logger: logging.Logger, message: str, **extra: Any) -> Iterator[Dict[str, Any]]:
    """Log ``message`` with elapsed ``duration_ms`` once the block exits.

    The yielded dict can be updated inside the block to add fields to the record.
    """

    fields: Dict[str, Any] = dict(extra)
    start = time.perf_counter()
    try:
        yield fields
    finally:
        fields["duration_ms"] = round((time.perf_counter() - start) * 1000.0, 3)
        logger.info(message, extra=fields)
