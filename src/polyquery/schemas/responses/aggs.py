# src/polyquery/schemas/responses/aggs.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""Aggregate (OHLCV bar) records."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from .base import PolygonRecord, list_decoder


class Agg(PolygonRecord):
    """One aggregate bar from ``/v2/aggs/ticker/.../range/...``."""

    open: float | None = Field(default=None, alias="o", description="Opening price.")
    high: float | None = Field(default=None, alias="h", description="High price.")
    low: float | None = Field(default=None, alias="l", description="Low price.")
    close: float | None = Field(default=None, alias="c", description="Closing price.")
    volume: float | None = Field(default=None, alias="v", description="Trading volume.")
    vwap: float | None = Field(
        default=None, alias="vw", description="Volume weighted average price."
    )
    timestamp: int | None = Field(
        default=None, alias="t", description="Bar start (Unix milliseconds)."
    )
    transactions: int | None = Field(
        default=None, alias="n", description="Number of transactions in the window."
    )
    otc: bool | None = Field(default=None, description="Whether this is an OTC ticker.")


class GroupedDailyAgg(Agg):
    """Daily bar for one ticker in a market-wide grouped response."""

    ticker: str | None = Field(default=None, alias="T", description="Ticker symbol.")


class PreviousCloseAgg(PolygonRecord):
    """Previous trading day's bar for a ticker."""

    ticker: str | None = Field(default=None, alias="T")
    open: float | None = Field(default=None, alias="o")
    high: float | None = Field(default=None, alias="h")
    low: float | None = Field(default=None, alias="l")
    close: float | None = Field(default=None, alias="c")
    volume: float | None = Field(default=None, alias="v")
    vwap: float | None = Field(default=None, alias="vw")
    timestamp: int | None = Field(default=None, alias="t")


class DailyOpenCloseAgg(PolygonRecord):
    """Open, close, pre-market and after-hours prices for one day.

    This endpoint answers with a flat object rather than a ``results`` envelope.
    """

    symbol: str | None = None
    from_: str | None = Field(default=None, alias="from", description="Date (YYYY-MM-DD).")
    open: float | None = None
    high: float | None = None
    low: float | None = None
    close: float | None = None
    volume: float | None = None
    after_hours: float | None = Field(default=None, alias="afterHours")
    pre_market: float | None = Field(default=None, alias="preMarket")
    status: str | None = None
    otc: bool | None = None


decode_aggregates = list_decoder(Agg)
decode_grouped_daily = list_decoder(GroupedDailyAgg)
decode_previous_close = list_decoder(PreviousCloseAgg)


def decode_daily_open_close(payload: Any) -> DailyOpenCloseAgg:
    return DailyOpenCloseAgg.model_validate(payload)
