"""Structured logging utilities with JSON output."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

DEFAULT_FIELDS = {
    "request_id",
    "component",
    "scenario",
    "family",
    "kind",
    "segment",
    "duration_ms",
    "loss",
    "ratio",
    "warnings",
    "sources",
    "error",
    "estimator",
    "estimators",
    "count",
    "declared",
    "expected",
    "layout_version",
    "models_dir",
    "path",
    "row",
    "rows",
    "fitted",
    "failed",
    "type",
}


class JSONFormatter(logging.Formatter):
    """JSON formatter adding common contextual fields when present."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
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


def _context_filter(request_id: Optional[str], component: Optional[str]) -> logging.Filter:
    f = logging.Filter()

    def _filter(record: logging.LogRecord) -> bool:  # type: ignore[override]
        if request_id and not hasattr(record, "request_id"):
            record.request_id = request_id
        if component and not hasattr(record, "component"):
            record.component = component
        return True

    f.filter = _filter  # type: ignore[assignment]
    return f


def configure_logging(
    request_id: Optional[str] = None,
    component: Optional[str] = None,
    level: int = logging.INFO,
    stream=None,
) -> None:
    """Configure root logger with structured JSON output.

    Embeds request_id/component defaults so downstream loggers inherit context
    without requiring every call to pass `extra`. Logs go to stderr by default so
    that command output on stdout stays machine-readable.
    """

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(_context_filter(request_id, component))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(handler)


def get_logger(name: str, request_id: Optional[str] = None, component: Optional[str] = None) -> logging.Logger:
    """Convenience helper to fetch a logger with optional context defaults."""

    logger = logging.getLogger(name)
    if request_id or component:
        logger.addFilter(_context_filter(request_id, component))
    return logger
