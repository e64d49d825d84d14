# tests/conftest.py
from __future__ import annotations

import json
from collections.abc import Iterator
from typing import Any

import pytest

from polyquery.client import Polygon, reset_default_client
from polyquery.config.settings import get_settings
from polyquery.query.response import TransportResponse


class StubTransport:
    """In-memory transport: records requested URLs and replays queued responses."""

    def __init__(self) -> None:
        self.urls: list[str] = []
        self._responses: list[TransportResponse] = []

    def reply(self, status: int, body: Any, request_id: str | None = None) -> StubTransport:
        text = body if isinstance(body, str) else json.dumps(body)
        self._responses.append(TransportResponse(status=status, body=text, request_id=request_id))
        return self

    async def get(self, url: str) -> TransportResponse:
        self.urls.append(url)
        if not self._responses:
            raise AssertionError(f"unexpected request: {url}")
        return self._responses.pop(0)

    async def post(self, url: str, body: str) -> TransportResponse:
        return await self.get(url)


@pytest.fixture
def stub() -> StubTransport:
    return StubTransport()


@pytest.fixture
def client(stub: StubTransport) -> Polygon:
    return Polygon(api_key="test-key", transport=stub, base_url="https://api.test")


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def _isolate_process_state() -> Iterator[None]:
    """Cached settings and the default client never leak between tests."""
    get_settings.cache_clear()
    reset_default_client()
    yield
    reset_default_client()
    get_settings.cache_clear()
