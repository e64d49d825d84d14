# src/polyquery/infrastructure/observability/tracing.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""OpenTelemetry span helper.

``traced(name, **attrs)`` wraps one operation in a span from the globally
configured tracer provider. Without an SDK configured, the API hands out
non-recording spans, so the helper is effectively free.

Layer:
    infrastructure/observability
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from opentelemetry import trace

_tracer = trace.get_tracer("polyquery")


@asynccontextmanager
async def traced(span_name: str, **attrs: Any) -> AsyncIterator[trace.Span]:
    """Open a span named ``span_name`` for the duration of the block.

    Args:
        span_name: Logical span name (e.g. ``"polygon.Aggs.aggregates"``).
        **attrs: Span attributes; ``None`` values are skipped.

    Yields:
        The active span.
    """
    attributes = {k: v for k, v in attrs.items() if v is not None}
    with _tracer.start_as_current_span(span_name, attributes=attributes) as span:
        yield span
