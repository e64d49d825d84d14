# src/polyquery/client.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""polygon.io client handle.

A :class:`Polygon` value holds the API key, the base URL and the transport
used by every :class:`~polyquery.query.builder.Query`. It is immutable:
``with_key`` / ``with_transport`` return new values, so one client can be
shared by any number of concurrent requests.

A process-wide default client is available for convenience. It is read and
replaced under a lock and initialized lazily from settings on first read.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from typing import Any

from polyquery.config.settings import PolyquerySettings, get_settings
from polyquery.infrastructure.http.transport import HttpxTransport, Transport

__all__ = [
    "DEFAULT_BASE_URL",
    "Polygon",
    "get_default_client",
    "reset_default_client",
    "set_default_client",
]

DEFAULT_BASE_URL = "https://api.polygon.io"


@dataclass(frozen=True, slots=True)
class Polygon:
    """Immutable client configuration.

    Attributes:
        api_key: polygon.io API key, or ``None`` (requests then fail with
            ``MissingApiKey`` before touching the network).
        transport: HTTP capability used for every request. The default
            :class:`HttpxTransport` opens no connection until the first one.
        base_url: API root without a trailing slash.
    """

    api_key: str | None = field(default=None, repr=False)
    transport: Transport = field(default_factory=HttpxTransport)
    base_url: str = DEFAULT_BASE_URL

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_settings(cls, settings: PolyquerySettings | None = None) -> Polygon:
        """Build a client from settings (``POLYGON_*`` environment variables).

        Args:
            settings: Explicit settings; defaults to :func:`get_settings`.

        Returns:
            A client using an :class:`HttpxTransport` with the configured timeout.
        """
        cfg = settings or get_settings()
        return cls(
            api_key=cfg.api_key_value,
            transport=HttpxTransport(timeout_s=cfg.timeout_s),
            base_url=cfg.base_url,
        )

    def with_key(self, api_key: str) -> Polygon:
        """Return a copy using ``api_key``."""
        return replace(self, api_key=api_key)

    def with_transport(self, transport: Transport) -> Polygon:
        """Return a copy using ``transport``."""
        return replace(self, transport=transport)

    def url(self, path: str) -> str:
        """Join ``path`` onto the base URL."""
        return f"{self.base_url}/{path.lstrip('/')}"

    async def aclose(self) -> None:
        """Close the transport when it exposes ``aclose``."""
        closer: Any = getattr(self.transport, "aclose", None)
        if closer is not None:
            await closer()

    async def __aenter__(self) -> Polygon:
        return self

    async def __aexit__(self, *_exc: object) -> None:
        await self.aclose()


_default_lock = threading.Lock()
_default_client: Polygon | None = None


def set_default_client(client: Polygon) -> Polygon | None:
    """Install ``client`` as the process-wide default.

    Returns:
        The previous default, if any, so callers can restore or close it.
    """
    global _default_client
    with _default_lock:
        previous, _default_client = _default_client, client
    return previous


def get_default_client() -> Polygon:
    """Return the process-wide default, creating it from settings if unset."""
    global _default_client
    with _default_lock:
        if _default_client is None:
            _default_client = Polygon.from_settings()
        return _default_client


def reset_default_client() -> Polygon | None:
    """Clear the process-wide default and return the previous one."""
    global _default_client
    with _default_lock:
        previous, _default_client = _default_client, None
    return previous
