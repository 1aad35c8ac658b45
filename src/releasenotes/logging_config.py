"""Logging setup shared by the CLI and library modules.

Records are written to stderr either as a single text line or, when
``RN_LOG_JSON`` is truthy, as one JSON object per line. Every record carries
the run's correlation id (``RN_CORR_ID`` or a generated UUID) and any
``extra=`` fields, with sensitive keys redacted.
"""

from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
import os
import sys
from typing import Any
import uuid

from releasenotes.utils.logging import redact

_TRUTHY = {"1", "true", "yes", "on"}

_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime", "correlation_id"}

_HANDLER_NAME = "releasenotes"

_CORRELATION_ID = os.environ.get("RN_CORR_ID") or uuid.uuid4().hex


def get_correlation_id() -> str:
    """Return the correlation id stamped on every record of this run."""

    return _CORRELATION_ID


def _json_enabled() -> bool:
    return os.environ.get("RN_LOG_JSON", "").strip().lower() in _TRUTHY


def _extras(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: redact(key, value)
        for key, value in vars(record).items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


class _CorrelationFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = _CORRELATION_ID
        return True


class TextFormatter(logging.Formatter):
    """Single-line formatter that appends redacted extras as JSON."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = _extras(record)
        if extras:
            line = f"{line} {json.dumps(extras, sort_keys=True, default=str)}"
        return line


class JSONFormatter(logging.Formatter):
    """Emit one JSON document per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": _CORRELATION_ID,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        payload.update(_extras(record))
        return json.dumps(payload, sort_keys=True, default=str)


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Install (or replace) the release notes stderr handler on the root logger."""

    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if _json_enabled() else TextFormatter())
    handler.addFilter(_CorrelationFilter())
    handler.set_name(_HANDLER_NAME)

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)
    return root


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


__all__ = [
    "JSONFormatter",
    "TextFormatter",
    "configure_logging",
    "get_correlation_id",
    "get_logger",
]
