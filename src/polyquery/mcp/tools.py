# src/polyquery/mcp/tools.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""Tool discovery and dispatch.

Progressive discovery for agents:

1. ``list_tools`` – the four meta tools and their parameter schemas.
2. ``list_modules`` – ``Tickers``, ``Aggs``, ``Financials``.
3. ``list_endpoints(module)`` – endpoint names and descriptions.
4. ``get_endpoint_schema(module, endpoint)`` – JSON Schema of the arguments.
5. ``call_endpoint(client, module, endpoint, arguments)`` – run it.

``call_tool`` dispatches a ``{"tool": ..., "params": {...}}`` envelope to the
functions above. Everything here is stateless over the static catalog.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Final

from polyquery.domain.exceptions.polygon import InvalidToolCall, UnknownTool
from polyquery.infrastructure.logging.logger import get_json_logger
from polyquery.mcp.schemas.tools import (
    ColumnSchema,
    EndpointInfo,
    ModuleInfo,
    TableResult,
    TextResult,
    ToolCallResult,
    ToolDescriptor,
    ToolRequest,
)
from polyquery.query.processors import parse_json
from polyquery.rest.catalog import MODULES, get_endpoint, get_module

if TYPE_CHECKING:
    from polyquery.client import Polygon

__all__ = [
    "call_endpoint",
    "call_tool",
    "get_endpoint_schema",
    "list_endpoints",
    "list_modules",
    "list_tools",
    "split_envelope",
]

log = get_json_logger(__name__)

_MODULE_NAMES: Final[list[str]] = list(MODULES)

_TOOLS: Final[tuple[ToolDescriptor, ...]] = (
    ToolDescriptor(
        name="list_modules",
        description="List all API modules (categories of endpoints)",
        parameters={"type": "object", "properties": {}},
    ),
    ToolDescriptor(
        name="list_endpoints",
        description="List all endpoints within a module",
        parameters={
            "type": "object",
            "properties": {
                "module": {
                    "type": "string",
                    "description": "Module name (e.g., 'Tickers', 'Aggs', 'Financials')",
                    "enum": _MODULE_NAMES,
                }
            },
            "required": ["module"],
        },
    ),
    ToolDescriptor(
        name="get_endpoint_schema",
        description="Get the parameter schema for a specific endpoint",
        parameters={
            "type": "object",
            "properties": {
                "module": {"type": "string", "description": "Module name", "enum": _MODULE_NAMES},
                "endpoint": {
                    "type": "string",
                    "description": "Endpoint name (e.g., 'aggregates', 'details')",
                },
            },
            "required": ["module", "endpoint"],
        },
    ),
    ToolDescriptor(
        name="call_endpoint",
        description="Call an API endpoint to get actual data",
        parameters={
            "type": "object",
            "properties": {
                "module": {"type": "string", "description": "Module name", "enum": _MODULE_NAMES},
                "endpoint": {"type": "string", "description": "Endpoint name"},
                "arguments": {
                    "type": "object",
                    "description": (
                        "Endpoint-specific arguments (use get_endpoint_schema to discover)"
                    ),
                },
            },
            "required": ["module", "endpoint", "arguments"],
        },
    ),
)


def list_tools() -> list[ToolDescriptor]:
    """Return the meta tools."""
    return list(_TOOLS)


def list_modules() -> list[ModuleInfo]:
    """Return the module taxonomy."""
    return [ModuleInfo(name=name, description=desc) for name, desc in MODULES.items()]


def list_endpoints(module: str) -> list[EndpointInfo]:
    """Return the endpoints of ``module``.

    Raises:
        UnknownModule: If ``module`` is not ``Tickers``, ``Aggs`` or ``Financials``.
    """
    return [
        EndpointInfo(name=spec.name, description=spec.description)
        for spec in get_module(module).values()
    ]


def get_endpoint_schema(module: str, endpoint: str) -> dict[str, Any]:
    """Return the JSON Schema of an endpoint's arguments.

    Raises:
        UnknownEndpoint: If the pair is not in the catalog.
    """
    return get_endpoint(module, endpoint).json_schema()


def split_envelope(payload: Any) -> tuple[Any, dict[str, Any] | None]:
    """Split a response body into ``(data, metadata)``.

    ``data`` is ``results`` when present, otherwise the whole body.
    ``metadata`` holds the other envelope fields, or ``None`` if there are none.
    """
    if isinstance(payload, dict) and "results" in payload:
        rest = {key: value for key, value in payload.items() if key != "results"}
        return payload["results"], rest or None
    return payload, None


async def call_endpoint(
    client: Polygon,
    module: str,
    endpoint: str,
    arguments: Mapping[str, Any] | None,
) -> TableResult:
    """Validate ``arguments``, run the endpoint and wrap the response.

    Raises:
        UnknownEndpoint: If the pair is not in the catalog.
        InvalidArguments: If ``arguments`` do not match the endpoint schema.
        PolyqueryError: Any request failure (transport, API, decode).
    """
    spec = get_endpoint(module, endpoint)
    body = await spec.build(client, arguments).get()
    data, metadata = split_envelope(parse_json(body))
    return TableResult(
        data=data,
        columns=[ColumnSchema(name=c.name, alias=c.alias, dtype=c.dtype) for c in spec.columns],
        metadata=metadata,
    )


def _text(value: Any) -> TextResult:
    return TextResult(text=json.dumps(value, ensure_ascii=False))


def _require_str(params: Mapping[str, Any], name: str) -> str:
    value = params.get(name)
    if not isinstance(value, str):
        raise InvalidToolCall(f"Missing '{name}' parameter")
    return value


def _unpack(request: ToolRequest | Mapping[str, Any]) -> tuple[str, Mapping[str, Any]]:
    if isinstance(request, ToolRequest):
        return request.tool, request.params
    tool = request.get("tool")
    if not isinstance(tool, str):
        raise InvalidToolCall("Missing 'tool' field")
    if "params" not in request:
        raise InvalidToolCall("Missing 'params' field")
    params = request["params"]
    if params is None:
        params = {}
    if not isinstance(params, Mapping):
        raise InvalidToolCall("'params' must be a JSON object")
    return tool, params


async def call_tool(client: Polygon, request: ToolRequest | Mapping[str, Any]) -> ToolCallResult:
    """Dispatch one tool call.

    Meta tools answer with a :class:`TextResult` holding JSON text;
    ``call_endpoint`` answers with a :class:`TableResult`.

    Raises:
        InvalidToolCall: If the envelope or its params are malformed.
        UnknownTool: If ``tool`` is not a known tool.
    """
    tool, params = _unpack(request)
    log.debug("tool.call", extra={"extra": {"tool": tool}})

    if tool == "list_tools":
        return _text([t.model_dump() for t in list_tools()])

    if tool == "list_modules":
        return _text([m.model_dump() for m in list_modules()])

    if tool == "list_endpoints":
        return _text([e.model_dump() for e in list_endpoints(_require_str(params, "module"))])

    if tool == "get_endpoint_schema":
        return _text(
            get_endpoint_schema(_require_str(params, "module"), _require_str(params, "endpoint"))
        )

    if tool == "call_endpoint":
        module = _require_str(params, "module")
        endpoint = _require_str(params, "endpoint")
        if "arguments" not in params:
            raise InvalidToolCall("Missing 'arguments' parameter")
        arguments = params["arguments"]
        if arguments is not None and not isinstance(arguments, Mapping):
            raise InvalidToolCall("'arguments' must be a JSON object")
        return await call_endpoint(client, module, endpoint, arguments)

    raise UnknownTool(tool)
