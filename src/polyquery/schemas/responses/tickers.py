# src/polyquery/schemas/responses/tickers.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""Ticker reference records: tickers, related companies, events and news."""

from __future__ import annotations

from typing import Any

from pydantic import Field, TypeAdapter

from .base import PolygonRecord, list_decoder, object_decoder, results_field


class CompanyAddress(PolygonRecord):
    address1: str | None = None
    address2: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    postal_code: str | None = None


class Branding(PolygonRecord):
    icon_url: str | None = None
    logo_url: str | None = None
    accent_color: str | None = None
    light_color: str | None = None
    dark_color: str | None = None


class Ticker(PolygonRecord):
    """Reference data for one ticker symbol."""

    ticker: str | None = None
    name: str | None = None
    market: str | None = None
    locale: str | None = None
    primary_exchange: str | None = None
    type_: str | None = Field(default=None, alias="type", description="Ticker type code.")
    active: bool | None = None
    currency_name: str | None = None
    currency_symbol: str | None = None
    base_currency_symbol: str | None = None
    base_currency_name: str | None = None
    cik: str | None = None
    composite_figi: str | None = None
    share_class_figi: str | None = None
    last_updated_utc: str | None = None
    delisted_utc: str | None = None
    source_feed: str | None = None
    address: CompanyAddress | None = None
    branding: Branding | None = None


class TickerType(PolygonRecord):
    code: str | None = None
    description: str | None = None
    asset_class: str | None = None
    locale: str | None = None


class TickerChange(PolygonRecord):
    ticker: str


class TickerChangeEvent(PolygonRecord):
    """A ticker rename (or other identifier change) for a company."""

    event_type: str = Field(alias="type")
    date: str
    ticker_change: TickerChange


class TickerChangeResults(PolygonRecord):
    """Identity of a company plus its ticker change history.

    ``name``, ``composite_figi`` and ``cik`` are required; a payload missing
    any of them fails to decode.
    """

    name: str
    composite_figi: str
    cik: str
    events: list[TickerChangeEvent] | None = None


class Publisher(PolygonRecord):
    name: str | None = None
    homepage_url: str | None = None
    logo_url: str | None = None
    favicon_url: str | None = None


class Insight(PolygonRecord):
    ticker: str | None = None
    sentiment: str | None = None
    sentiment_reasoning: str | None = None


class TickerNews(PolygonRecord):
    """A news article mentioning one or more tickers."""

    id: str | None = None
    title: str | None = None
    author: str | None = None
    description: str | None = None
    article_url: str | None = None
    amp_url: str | None = None
    image_url: str | None = None
    published_utc: str | None = None
    keywords: list[str] | None = None
    tickers: list[str] | None = None
    publisher: Publisher | None = None
    insights: list[Insight] | None = None


class _RelatedTicker(PolygonRecord):
    ticker: str


_related_adapter = TypeAdapter(list[_RelatedTicker])


decode_all = list_decoder(Ticker)
decode_details = object_decoder(Ticker)
decode_types = list_decoder(TickerType)
decode_events = object_decoder(TickerChangeResults)
decode_news = list_decoder(TickerNews)


def decode_related(payload: Any) -> list[str]:
    """Return the related ticker symbols; every entry must carry ``ticker``."""
    return [row.ticker for row in _related_adapter.validate_python(results_field(payload))]
