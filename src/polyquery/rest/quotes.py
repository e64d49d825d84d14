# src/polyquery/rest/quotes.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""Last-quote endpoints.

These are not part of the tool catalog; they are plain queries with no
optional parameters, so any extra parameter is rejected.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import quote

from polyquery.query.builder import API_KEY_PARAM, Query
from polyquery.schemas.responses.quotes import decode_last_forex_quote, decode_last_quote

if TYPE_CHECKING:
    from polyquery.client import Polygon

__all__ = ["last_forex_quote", "last_quote"]


def _closed(query: Query[str]) -> Query[str]:
    # An allow-list holding only a name never sent makes every other name invalid.
    return query.optional(API_KEY_PARAM)


def last_quote(client: Polygon, ticker: str) -> Query[str]:
    """Most recent NBBO quote for a stock ticker."""
    return _closed(
        Query(
            client,
            client.url(f"/v2/last/nbbo/{quote(ticker, safe=':')}"),
            endpoint="Quotes.last_quote",
            default_decoder=decode_last_quote,
        )
    )


def last_forex_quote(client: Polygon, from_: str, to: str) -> Query[str]:
    """Most recent quote for the currency pair ``from_``/``to``."""
    return _closed(
        Query(
            client,
            client.url(
                f"/v1/last_quote/currencies/{quote(from_, safe='')}/{quote(to, safe='')}"
            ),
            endpoint="Quotes.last_forex_quote",
            default_decoder=decode_last_forex_quote,
        )
    )
