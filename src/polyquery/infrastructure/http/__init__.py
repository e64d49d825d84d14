"""HTTP transport exports."""

from __future__ import annotations

from .transport import HttpxTransport, Transport

__all__ = ["HttpxTransport", "Transport"]
