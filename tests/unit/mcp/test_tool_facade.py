# tests/unit/mcp/test_tool_facade.py
from __future__ import annotations

import json

import pytest

from polyquery.domain.exceptions.polygon import (
    ApiError,
    InvalidArguments,
    InvalidToolCall,
    UnknownEndpoint,
    UnknownModule,
    UnknownTool,
)
from polyquery.mcp.schemas.tools import TableResult, TextResult, ToolRequest
from polyquery.mcp.tools import (
    call_endpoint,
    call_tool,
    get_endpoint_schema,
    list_endpoints,
    list_modules,
    list_tools,
    split_envelope,
)


def test_list_tools_describes_the_four_meta_tools() -> None:
    tools = {tool.name: tool for tool in list_tools()}
    assert list(tools) == ["list_modules", "list_endpoints", "get_endpoint_schema", "call_endpoint"]
    assert tools["list_modules"].parameters == {"type": "object", "properties": {}}
    assert tools["list_endpoints"].parameters["properties"]["module"]["enum"] == [
        "Tickers",
        "Aggs",
        "Financials",
    ]
    assert tools["call_endpoint"].parameters["required"] == ["module", "endpoint", "arguments"]


def test_list_modules_and_endpoints() -> None:
    assert [m.name for m in list_modules()] == ["Tickers", "Aggs", "Financials"]
    endpoints = list_endpoints("Aggs")
    assert endpoints[0].name == "aggregates"
    assert endpoints[0].description == "Get OHLCV bars over date range"
    with pytest.raises(UnknownModule):
        list_endpoints("Options")


def test_get_endpoint_schema() -> None:
    assert get_endpoint_schema("Tickers", "related")["required"] == ["ticker"]
    with pytest.raises(UnknownEndpoint):
        get_endpoint_schema("Tickers", "splits")


def test_split_envelope() -> None:
    assert split_envelope({"results": [1], "status": "OK"}) == ([1], {"status": "OK"})
    assert split_envelope({"results": []}) == ([], None)
    assert split_envelope({"symbol": "AAPL"}) == ({"symbol": "AAPL"}, None)


@pytest.mark.asyncio
async def test_call_endpoint_related_without_metadata(client, stub) -> None:
    stub.reply(200, {"results": [{"ticker": "MSFT"}, {"ticker": "GOOG"}]})

    result = await call_endpoint(client, "Tickers", "related", {"ticker": "AAPL"})

    assert stub.urls == ["https://api.test/v1/related-companies/AAPL?apiKey=test-key"]
    assert result.data == [{"ticker": "MSFT"}, {"ticker": "GOOG"}]
    assert result.metadata is None
    assert [c.name for c in result.columns] == ["ticker"]


@pytest.mark.asyncio
async def test_call_endpoint_keeps_envelope_metadata(client, stub) -> None:
    stub.reply(
        200,
        {"results": [{"o": 1.0}], "status": "OK", "request_id": "r1", "next_url": "https://api.test/next"},
    )

    result = await call_endpoint(
        client,
        "Aggs",
        "aggregates",
        {"ticker": "AAPL", "multiplier": 1, "timespan": "day", "from": "2024-01-01", "to": "2024-01-05", "limit": 10},
    )

    assert stub.urls == [
        "https://api.test/v2/aggs/ticker/AAPL/range/1/day/2024-01-01/2024-01-05?limit=10&apiKey=test-key"
    ]
    assert result.metadata == {"status": "OK", "request_id": "r1", "next_url": "https://api.test/next"}
    dumped = result.model_dump(by_alias=True)
    assert dumped["kind"] == "table"
    assert dumped["schema"][0] == {"name": "o", "alias": "open", "dtype": "float64"}


@pytest.mark.asyncio
async def test_call_endpoint_validates_before_sending(client, stub) -> None:
    with pytest.raises(InvalidArguments):
        await call_endpoint(client, "Tickers", "related", {"symbol": "AAPL"})
    assert stub.urls == []


@pytest.mark.asyncio
async def test_call_endpoint_ignores_arguments_without_a_parameter(client, stub) -> None:
    stub.reply(200, {"results": [{"code": "CS", "description": "Common Stock"}]})
    stub.reply(200, {"results": [{"ticker": "MSFT"}]})

    types = await call_endpoint(client, "Tickers", "types", {"asset_class": "stocks"})
    related = await call_endpoint(client, "Tickers", "related", {"ticker": "AAPL", "limit": 5})

    assert stub.urls == [
        "https://api.test/v3/reference/tickers/types?apiKey=test-key",
        "https://api.test/v1/related-companies/AAPL?apiKey=test-key",
    ]
    assert types.data == [{"code": "CS", "description": "Common Stock"}]
    assert related.data == [{"ticker": "MSFT"}]


@pytest.mark.asyncio
async def test_call_endpoint_surfaces_api_errors(client, stub) -> None:
    stub.reply(403, {"error": "unauthorized", "request_id": "abc123"})
    with pytest.raises(ApiError):
        await call_endpoint(client, "Tickers", "types", {})


@pytest.mark.asyncio
async def test_call_tool_meta_tools_return_json_text(client, stub) -> None:
    result = await call_tool(client, {"tool": "list_endpoints", "params": {"module": "Financials"}})

    assert isinstance(result, TextResult)
    names = [row["name"] for row in json.loads(result.text)]
    assert names == ["balance_sheets", "cash_flow_statements", "income_statements", "ratios"]

    listed = await call_tool(client, ToolRequest(tool="list_tools", params={}))
    assert len(json.loads(listed.text)) == 4

    schema = await call_tool(client, {"tool": "get_endpoint_schema", "params": {"module": "Tickers", "endpoint": "types"}})
    assert json.loads(schema.text)["description"] == "No parameters required"
    assert stub.urls == []


@pytest.mark.asyncio
async def test_call_tool_dispatches_call_endpoint(client, stub) -> None:
    stub.reply(200, {"results": [{"ticker": "MSFT"}], "status": "OK"})

    result = await call_tool(
        client,
        {"tool": "call_endpoint", "params": {"module": "Tickers", "endpoint": "related", "arguments": {"ticker": "AAPL"}}},
    )

    assert isinstance(result, TableResult)
    assert result.metadata == {"status": "OK"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("request_body", "message"),
    [
        ({"params": {}}, "Missing 'tool' field"),
        ({"tool": "list_modules"}, "Missing 'params' field"),
        ({"tool": "list_endpoints", "params": {}}, "Missing 'module' parameter"),
        ({"tool": "get_endpoint_schema", "params": {"module": "Aggs"}}, "Missing 'endpoint' parameter"),
        ({"tool": "call_endpoint", "params": {"module": "Aggs", "endpoint": "aggregates"}}, "Missing 'arguments' parameter"),
    ],
)
async def test_call_tool_rejects_malformed_requests(client, request_body: dict, message: str) -> None:
    with pytest.raises(InvalidToolCall) as exc_info:
        await call_tool(client, request_body)
    assert str(exc_info.value) == message


@pytest.mark.asyncio
async def test_call_tool_unknown_tool(client) -> None:
    with pytest.raises(UnknownTool, match="Unknown tool: drop_tables"):
        await call_tool(client, {"tool": "drop_tables", "params": {}})
