# src/polyquery/rest/aggs.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""Aggregate (OHLCV bar) endpoints.

Each function returns a raw :class:`Query` with the path filled in and the
endpoint's optional parameters allowed; chain ``param``, then ``decoded``,
``as_dataframe`` or ``with_decoder`` before awaiting ``get``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from polyquery.domain.value_objects import Timespan
from polyquery.query.builder import Query
from polyquery.rest.catalog import AGGREGATES, DAILY_OPEN_CLOSE, GROUPED_DAILY, PREVIOUS_CLOSE

if TYPE_CHECKING:
    from polyquery.client import Polygon

__all__ = ["aggregates", "daily_open_close", "grouped_daily", "previous_close"]


def aggregates(
    client: Polygon,
    ticker: str,
    multiplier: int,
    timespan: Timespan | str,
    from_: str,
    to: str,
) -> Query[str]:
    """Bars for ``ticker`` between ``from_`` and ``to``.

    Args:
        client: Client supplying key and transport.
        ticker: Ticker symbol, e.g. ``"AAPL"``.
        multiplier: Number of ``timespan`` units per bar.
        timespan: Bar size; abbreviations such as ``"wk"`` are accepted.
        from_: Window start (``YYYY-MM-DD`` or Unix milliseconds).
        to: Window end (``YYYY-MM-DD`` or Unix milliseconds).

    Optional parameters: ``adjusted``, ``sort``, ``limit``.

    Raises:
        InvalidTimespan: If ``timespan`` is not recognized.
    """
    return AGGREGATES.query(
        client,
        {
            "ticker": ticker,
            "multiplier": multiplier,
            "timespan": Timespan.parse(timespan),
            "from": from_,
            "to": to,
        },
    )


def previous_close(client: Polygon, ticker: str) -> Query[str]:
    """Previous trading day's bar. Optional: ``adjusted``."""
    return PREVIOUS_CLOSE.query(client, {"ticker": ticker})


def grouped_daily(client: Polygon, date: str) -> Query[str]:
    """Daily bars for every US stock on ``date``. Optional: ``adjusted``, ``include_otc``."""
    return GROUPED_DAILY.query(client, {"date": date})


def daily_open_close(client: Polygon, ticker: str, date: str) -> Query[str]:
    """Open, close and extended-hours prices on ``date``. Optional: ``adjusted``."""
    return DAILY_OPEN_CLOSE.query(client, {"ticker": ticker, "date": date})
