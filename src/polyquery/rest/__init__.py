"""polygon.io REST endpoints grouped by module."""

from __future__ import annotations

from . import aggs, financials, quotes, tickers

__all__ = ["aggs", "financials", "quotes", "tickers"]
