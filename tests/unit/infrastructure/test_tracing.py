# tests/unit/infrastructure/test_tracing.py
from __future__ import annotations

import pytest

from polyquery.infrastructure.observability.tracing import traced


@pytest.mark.asyncio
async def test_traced_yields_a_span_without_sdk() -> None:
    async with traced("polygon.unit", endpoint="unit", url=None) as span:
        span.set_attribute("http.status_code", 200)
        assert span is not None


@pytest.mark.asyncio
async def test_traced_propagates_exceptions() -> None:
    with pytest.raises(RuntimeError, match="boom"):
        async with traced("polygon.unit"):
            raise RuntimeError("boom")
