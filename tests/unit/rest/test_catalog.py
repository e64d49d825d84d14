# tests/unit/rest/test_catalog.py
from __future__ import annotations

import pytest

from polyquery.domain.exceptions.polygon import InvalidArguments, UnknownEndpoint, UnknownModule
from polyquery.rest.catalog import (
    AGGREGATES,
    BALANCE_SHEETS,
    CATALOG,
    MODULES,
    TICKERS_NEWS,
    TICKERS_TYPES,
    get_endpoint,
    get_module,
)


def test_modules_and_catalog_agree() -> None:
    assert list(MODULES) == ["Tickers", "Aggs", "Financials"]
    assert list(CATALOG) == list(MODULES)
    assert list(CATALOG["Aggs"]) == ["aggregates", "previous_close", "grouped_daily", "daily_open_close"]
    assert list(CATALOG["Tickers"]) == ["all", "details", "related", "types", "events", "news"]
    assert list(CATALOG["Financials"]) == [
        "balance_sheets",
        "cash_flow_statements",
        "income_statements",
        "ratios",
    ]


def test_lookup_errors() -> None:
    with pytest.raises(UnknownModule):
        get_module("Options")
    with pytest.raises(UnknownEndpoint):
        get_endpoint("Aggs", "trades")
    with pytest.raises(UnknownEndpoint):
        get_endpoint("Options", "chain")


def test_aggregates_schema_lists_required_path_arguments() -> None:
    schema = AGGREGATES.json_schema()

    assert schema["type"] == "object"
    assert "additionalProperties" not in schema
    assert schema["required"] == ["ticker", "multiplier", "timespan", "from", "to"]
    assert schema["properties"]["timespan"]["enum"] == [
        "minute",
        "hour",
        "day",
        "week",
        "month",
        "quarter",
        "year",
    ]
    assert schema["properties"]["limit"] == {
        "type": "integer",
        "description": "Maximum number of base aggregates queried (max: 50000, default: 5000)",
        "minimum": 0,
    }


def test_endpoint_without_arguments_has_the_empty_schema() -> None:
    schema = TICKERS_TYPES.json_schema()
    assert schema == {"type": "object", "properties": {}, "description": "No parameters required"}
    schema["properties"]["x"] = {}
    assert TICKERS_TYPES.json_schema()["properties"] == {}


def test_every_endpoint_schema_only_requires_declared_properties() -> None:
    for endpoints in CATALOG.values():
        for spec in endpoints.values():
            schema = spec.json_schema()
            assert set(schema.get("required", [])) <= set(schema["properties"])


def test_validate_arguments_drops_keys_without_a_parameter() -> None:
    assert TICKERS_NEWS.validate_arguments({"ticker": "AAPL", "bogus": 1}) == {
        "ticker": "AAPL",
        "limit": None,
        "order": None,
    }
    assert TICKERS_TYPES.validate_arguments({"asset_class": "stocks", "locale": "us"}) == {}


def test_validate_arguments_rejects_mistyped_and_missing_values() -> None:
    with pytest.raises(InvalidArguments):
        TICKERS_NEWS.validate_arguments({"limit": "10"})
    with pytest.raises(InvalidArguments):
        TICKERS_NEWS.validate_arguments({"limit": -1})
    with pytest.raises(InvalidArguments) as exc_info:
        AGGREGATES.validate_arguments({"ticker": "AAPL"})
    assert exc_info.value.errors


def test_validate_arguments_accepts_timespan_aliases() -> None:
    values = AGGREGATES.validate_arguments(
        {"ticker": "AAPL", "multiplier": 5, "timespan": "min", "from": "2024-01-01", "to": "2024-01-02"}
    )
    assert values["timespan"] == "minute"
    assert values["from"] == "2024-01-01"


def test_build_fills_path_and_query(client) -> None:
    q = AGGREGATES.build(
        client,
        {
            "ticker": "BRK.A",
            "multiplier": 1,
            "timespan": "day",
            "from": "2024-01-01",
            "to": "2024-01-05",
            "adjusted": False,
            "sort": "desc",
        },
    )
    assert q.url == "https://api.test/v2/aggs/ticker/BRK.A/range/1/day/2024-01-01/2024-01-05"
    assert q.endpoint == "Aggs.aggregates"
    assert q.param_names() == ["adjusted", "sort"]
    assert q.allowed == frozenset({"adjusted", "sort", "limit"})


def test_path_segments_are_percent_encoded(client) -> None:
    q = get_endpoint("Tickers", "details").build(client, {"ticker": "X:BTC/USD"})
    assert q.url == "https://api.test/v3/reference/tickers/X:BTC%2FUSD"


def test_financials_arguments_map_to_filter_names(client) -> None:
    q = BALANCE_SHEETS.build(
        client,
        {"ticker": "AAPL", "period_of_report_date": "2024-06-30", "order": "asc", "limit": 2},
    )
    assert dict(q.pairs) == {
        "tickers": "AAPL",
        "period_end": "2024-06-30",
        "limit": 2,
        "sort": "asc",
    }
