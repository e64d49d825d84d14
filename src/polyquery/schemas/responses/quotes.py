# src/polyquery/schemas/responses/quotes.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""Last-quote records (stocks NBBO and currency pairs)."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from polyquery.domain.exceptions.polygon import DecodeError

from .base import PolygonRecord, object_decoder


class LastQuote(PolygonRecord):
    """Most recent national best bid and offer for a stock."""

    ticker: str | None = Field(default=None, alias="T")
    ask_price: float | None = Field(default=None, alias="P")
    ask_size: float | None = Field(default=None, alias="S")
    ask_exchange: int | None = Field(default=None, alias="X")
    bid_price: float | None = Field(default=None, alias="p")
    bid_size: float | None = Field(default=None, alias="s")
    bid_exchange: int | None = Field(default=None, alias="x")
    sip_timestamp: int | None = Field(default=None, alias="t")
    participant_timestamp: int | None = Field(default=None, alias="y")
    sequence_number: int | None = Field(default=None, alias="q")


class LastForexQuote(PolygonRecord):
    """Most recent quote for a currency pair."""

    symbol: str | None = None
    ask: float | None = None
    bid: float | None = None
    exchange: int | None = None
    timestamp: int | None = None


decode_last_quote = object_decoder(LastQuote)


def decode_last_forex_quote(payload: Any) -> LastForexQuote:
    """Decode ``{"symbol": ..., "last": {...}}``."""
    if not isinstance(payload, dict) or not isinstance(payload.get("last"), dict):
        raise DecodeError("Decode error: missing required field 'last'")
    return LastForexQuote.model_validate({"symbol": payload.get("symbol"), **payload["last"]})
