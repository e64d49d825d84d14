# src/polyquery/rest/tickers.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""Ticker reference endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from polyquery.query.builder import Query
from polyquery.rest.catalog import (
    TICKERS_ALL,
    TICKERS_DETAILS,
    TICKERS_EVENTS,
    TICKERS_NEWS,
    TICKERS_RELATED,
    TICKERS_TYPES,
)

if TYPE_CHECKING:
    from polyquery.client import Polygon

__all__ = ["all", "details", "events", "news", "related", "types"]


def all(client: Polygon) -> Query[str]:  # noqa: A001 - mirrors the endpoint name
    """List tickers.

    Optional: ``ticker``, ``type``, ``market``, ``exchange``, ``limit``,
    ``sort``, ``order``.
    """
    return TICKERS_ALL.query(client)


def details(client: Polygon, ticker: str) -> Query[str]:
    """Details for one ticker. Optional: ``date``."""
    return TICKERS_DETAILS.query(client, {"ticker": ticker})


def related(client: Polygon, ticker: str) -> Query[str]:
    """Tickers related to ``ticker``."""
    return TICKERS_RELATED.query(client, {"ticker": ticker})


def types(client: Polygon) -> Query[str]:
    """Ticker type codes. Optional: ``asset_class``, ``locale``."""
    return TICKERS_TYPES.query(client)


def events(client: Polygon, ticker: str) -> Query[str]:
    """Ticker change history. Optional: ``types``."""
    return TICKERS_EVENTS.query(client, {"ticker": ticker})


def news(client: Polygon) -> Query[str]:
    """Recent news. Optional: ``ticker``, ``limit``, ``order``."""
    return TICKERS_NEWS.query(client)
