# tests/unit/rest/test_endpoint_queries.py
from __future__ import annotations

import pandas as pd
import pytest

from polyquery.domain.exceptions.polygon import ApiError, InvalidTimespan, ParameterValidationError
from polyquery.domain.value_objects import Limit, SortOrder, Timespan
from polyquery.rest import aggs, financials, quotes, tickers
from polyquery.schemas.responses.aggs import Agg

_BARS = {"results": [{"o": 1, "h": 2, "l": 0.5, "c": 1.5, "v": 1000, "t": 1700000000000}]}
_AGGS_URL = "https://api.test/v2/aggs/ticker/AAPL/range/1/day/2024-01-01/2024-01-05?apiKey=test-key"


@pytest.mark.asyncio
async def test_aggregates_decodes_typed_bars(client, stub) -> None:
    stub.reply(200, _BARS)

    bars = await aggs.aggregates(client, "AAPL", 1, Timespan.DAY, "2024-01-01", "2024-01-05").decoded().get()

    assert stub.urls == [_AGGS_URL]
    assert bars == [
        Agg(open=1.0, high=2.0, low=0.5, close=1.5, volume=1000.0, timestamp=1700000000000)
    ]
    bar = bars[0]
    assert bar.vwap is None
    assert bar.transactions is None
    assert bar.otc is None


@pytest.mark.asyncio
async def test_aggregates_forbidden_is_an_api_error(client, stub) -> None:
    stub.reply(403, {"error": "unauthorized", "request_id": "abc123"})

    with pytest.raises(ApiError) as exc_info:
        await aggs.aggregates(client, "AAPL", 1, "day", "2024-01-01", "2024-01-05").decoded().get()

    assert exc_info.value == ApiError(403, "unauthorized", "abc123")


def test_aggregates_rejects_unknown_timespan(client) -> None:
    with pytest.raises(InvalidTimespan):
        aggs.aggregates(client, "AAPL", 1, "fortnight", "2024-01-01", "2024-01-05")


@pytest.mark.asyncio
async def test_aggregates_optional_params_and_dataframe(client, stub) -> None:
    stub.reply(200, _BARS)

    frame = await (
        aggs.aggregates(client, "AAPL", 1, "wk", "2024-01-01", "2024-01-05")
        .param("adjusted", True)
        .param("sort", SortOrder.ASC)
        .param("limit", Limit.from_value("abc"))
        .as_dataframe()
        .get()
    )

    assert stub.urls == [
        "https://api.test/v2/aggs/ticker/AAPL/range/1/week/2024-01-01/2024-01-05"
        "?adjusted=true&sort=asc&apiKey=test-key"
    ]
    assert isinstance(frame, pd.DataFrame)
    assert frame.loc[0, "c"] == 1.5


@pytest.mark.asyncio
async def test_endpoint_allow_list_rejects_foreign_params(client, stub) -> None:
    q = aggs.previous_close(client, "AAPL").param("include_otc", True)

    with pytest.raises(ParameterValidationError) as exc_info:
        await q.get()

    assert exc_info.value.invalid == ["include_otc"]
    assert stub.urls == []


@pytest.mark.asyncio
async def test_daily_open_close_decodes_flat_payload(client, stub) -> None:
    stub.reply(
        200,
        {"status": "OK", "from": "2024-01-02", "symbol": "AAPL", "open": 187.15, "close": 185.64, "preMarket": 186.0},
    )

    record = await aggs.daily_open_close(client, "AAPL", "2024-01-02").decoded().get()

    assert stub.urls == ["https://api.test/v1/open-close/AAPL/2024-01-02?apiKey=test-key"]
    assert record.from_ == "2024-01-02"
    assert record.pre_market == 186.0
    assert record.after_hours is None


@pytest.mark.asyncio
async def test_ticker_related_returns_symbols(client, stub) -> None:
    stub.reply(200, {"results": [{"ticker": "MSFT"}, {"ticker": "GOOG"}], "status": "OK"})
    assert await tickers.related(client, "AAPL").decoded().get() == ["MSFT", "GOOG"]


@pytest.mark.asyncio
async def test_ticker_all_sends_filters(client, stub) -> None:
    stub.reply(200, {"results": [{"ticker": "A", "type": "CS", "active": True}]})

    rows = await tickers.all(client).param("market", "stocks").param("limit", 10).decoded().get()

    assert stub.urls == ["https://api.test/v3/reference/tickers?market=stocks&limit=10&apiKey=test-key"]
    assert rows[0].ticker == "A"
    assert rows[0].type_ == "CS"


@pytest.mark.asyncio
async def test_financials_use_filter_names(client, stub) -> None:
    stub.reply(200, {"results": [{"tickers": ["AAPL"], "period_end": "2024-06-30", "total_assets": 1.0}]})

    sheets = await (
        financials.balance_sheets(client).param("tickers", "AAPL").param("period_end.gte", "2024-01-01").decoded().get()
    )

    assert stub.urls == [
        "https://api.test/stocks/financials/v1/balance-sheets?tickers=AAPL&period_end.gte=2024-01-01&apiKey=test-key"
    ]
    assert sheets[0].total_assets == 1.0


@pytest.mark.asyncio
async def test_last_quote_rejects_any_parameter(client, stub) -> None:
    with pytest.raises(ParameterValidationError):
        await quotes.last_quote(client, "AAPL").param("limit", 1).get()
    assert stub.urls == []


@pytest.mark.asyncio
async def test_last_forex_quote_decodes_nested_quote(client, stub) -> None:
    stub.reply(200, {"status": "success", "symbol": "EUR/USD", "last": {"ask": 1.09, "bid": 1.08, "exchange": 48}})

    quote = await quotes.last_forex_quote(client, "EUR", "USD").decoded().get()

    assert stub.urls == ["https://api.test/v1/last_quote/currencies/EUR/USD?apiKey=test-key"]
    assert quote.symbol == "EUR/USD"
    assert quote.ask == 1.09
