# src/polyquery/infrastructure/logging/logger.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""Structured JSON logging utilities.

An idempotent root configurator and a per-module logger factory producing one
JSON object per line. Records are enriched with the caller's correlation id
(``request_id``) and the active OpenTelemetry trace id when one exists.

Structured fields are passed as ``extra={"extra": {...}}``.

Typical usage:
    configure_root_logging()
    log = get_json_logger(__name__)
"""

from __future__ import annotations

import json
import logging
import os
import re
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

from opentelemetry import trace as otel_trace

__all__ = [
    "configure_root_logging",
    "get_json_logger",
    "get_request_id",
    "redact_api_key",
    "set_request_context",
]

# Per-task correlation context.
_REQUEST_ID_CTX: ContextVar[str | None] = ContextVar("polyquery_request_id", default=None)

_API_KEY_RE = re.compile(r"(?i)(apiKey=)[^&#]*")


def set_request_context(*, request_id: str | None) -> None:
    """Set the correlation id sent and logged for calls made from this task."""
    _REQUEST_ID_CTX.set(request_id)


def get_request_id() -> str | None:
    """Return the current correlation id, if any."""
    return _REQUEST_ID_CTX.get(None)


def redact_api_key(url: str) -> str:
    """Mask the ``apiKey`` query parameter so URLs are safe to log."""
    return _API_KEY_RE.sub(r"\1***", url)


def _current_trace_id() -> str | None:
    ctx = otel_trace.get_current_span().get_span_context()
    # OTEL uses 0 as the "invalid" trace id sentinel.
    if not ctx.trace_id:
        return None
    return f"{ctx.trace_id:032x}"


class _JsonFormatter(logging.Formatter):
    """JSON log formatter emitting stable keys and optional extras."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        rid = getattr(record, "request_id", None) or _REQUEST_ID_CTX.get(None)
        if rid:
            payload["request_id"] = rid

        tid = getattr(record, "trace_id", None) or _current_trace_id()
        if tid:
            payload["trace_id"] = tid

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            if exc_type is not None:
                payload["exc_type"] = exc_type.__name__
            if exc_value is not None:
                payload["exc_message"] = str(exc_value)

        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)

        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str)


def configure_root_logging(level: str | int | None = None) -> None:
    """Initialize the root logger with a JSON stream handler (idempotent).

    Args:
        level: Logging level or level name. If ``None``, use env
            ``POLYGON_LOG_LEVEL`` or ``INFO``.
    """
    root = logging.getLogger()

    env_level = os.getenv("POLYGON_LOG_LEVEL")
    resolved: int | str = (
        level if level is not None else (env_level.upper() if env_level else "INFO")
    )
    if isinstance(resolved, str):
        resolved = resolved.upper()
    root.setLevel(resolved)

    if root.handlers:
        # Already configured; avoid duplicate handlers.
        return

    handler = logging.StreamHandler()
    handler.setFormatter(_JsonFormatter())
    root.addHandler(handler)


def get_json_logger(name: str) -> logging.Logger:
    """Return a module logger that defers to the JSON root handler.

    This does *not* configure the root logger; call
    :func:`configure_root_logging` once at startup.
    """
    logger = logging.getLogger(name)
    logger.propagate = True
    return logger
