# src/polyquery/infrastructure/http/transport.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""HTTP transport capability.

The request pipeline only needs ``get(url)`` and ``post(url, body)`` returning
a :class:`TransportResponse`. :class:`HttpxTransport` is the default
implementation on top of ``httpx.AsyncClient``; tests and callers can inject
anything satisfying :class:`Transport`.

Failure mapping:
    * ``httpx.TimeoutException`` → :class:`TransportTimeout` (a ``TimeoutError``)
    * other ``httpx.RequestError`` → :class:`TransportError`

HTTP error statuses are *not* errors here; classification happens in the
query layer.
"""

from __future__ import annotations

from typing import Final, Protocol, runtime_checkable

import httpx

from polyquery.domain.exceptions.polygon import TransportError, TransportTimeout
from polyquery.infrastructure.logging.logger import get_request_id, redact_api_key
from polyquery.query.response import TransportResponse

__all__ = ["HttpxTransport", "Transport"]

_DEFAULT_TIMEOUT: Final[float] = 10.0
_DEFAULT_HEADERS: Final[dict[str, str]] = {
    "Accept": "application/json",
    "User-Agent": "polyquery/0.1",
}


@runtime_checkable
class Transport(Protocol):
    """Capability performing one HTTP round trip."""

    async def get(self, url: str) -> TransportResponse:
        """Issue a GET request to ``url``."""
        ...

    async def post(self, url: str, body: str) -> TransportResponse:
        """Issue a POST request with a JSON ``body``."""
        ...


class HttpxTransport:
    """``httpx.AsyncClient`` backed transport."""

    def __init__(
        self,
        *,
        http: httpx.AsyncClient | None = None,
        timeout_s: float | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            http: Optional shared ``httpx.AsyncClient``. If omitted, a client
                is created on the first request and owned by this instance.
            timeout_s: Per-request timeout in seconds (default ``10.0``).
        """
        self._timeout = float(timeout_s) if timeout_s is not None else _DEFAULT_TIMEOUT
        self._owns_client = http is None
        self._client: httpx.AsyncClient | None = http
        if http is not None:
            for key, value in _DEFAULT_HEADERS.items():
                http.headers.setdefault(key, value)

    @property
    def http(self) -> httpx.AsyncClient:
        """The underlying client, created on first access when owned."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers=_DEFAULT_HEADERS.copy(),
            )
        return self._client

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance owns it."""
        if self._owns_client and self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> HttpxTransport:
        return self

    async def __aexit__(self, *_exc: object) -> None:
        await self.aclose()

    async def get(self, url: str) -> TransportResponse:
        return await self._send("GET", url)

    async def post(self, url: str, body: str) -> TransportResponse:
        return await self._send(
            "POST", url, content=body, headers={"Content-Type": "application/json"}
        )

    async def _send(
        self,
        method: str,
        url: str,
        *,
        content: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> TransportResponse:
        outbound = dict(headers or {})
        request_id = get_request_id()
        if request_id:
            outbound.setdefault("X-Request-ID", request_id)

        try:
            response = await self.http.request(
                method,
                url,
                content=content,
                headers=outbound,
                timeout=self._timeout,
            )
        except httpx.TimeoutException as exc:
            raise TransportTimeout(
                redact_api_key(f"HTTP request timed out: {exc}"), url=redact_api_key(url)
            ) from exc
        except httpx.RequestError as exc:
            raise TransportError(
                redact_api_key(f"HTTP request error: {exc}"), url=redact_api_key(url)
            ) from exc

        return TransportResponse(
            status=response.status_code,
            body=response.text,
            request_id=response.headers.get("x-request-id"),
        )
