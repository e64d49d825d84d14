# src/polyquery/mcp/server.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""Polyquery tool server.

Purpose:
    Expose the tool facade (:mod:`polyquery.mcp.tools`) to agents:

    * A framework-agnostic :class:`ToolServer` for programmatic use.
    * A FastAPI ``app`` for tool-calling over HTTP.

Contract:
    - Input: ToolRequest { tool: str, params: dict }
    - Output: ToolResponse { result: TextResult | TableResult | null,
      error: ToolError | null }

HTTP status mapping:
    - 200 for successful calls.
    - 404 for unknown tools, modules and endpoints.
    - 422 for malformed tool calls and endpoint arguments.
    - 502 when polygon.io fails, the network fails or the body cannot be decoded.
    - 500 for anything else (e.g. a missing API key).
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from typing import Any, Final

from fastapi import FastAPI, HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from polyquery.client import Polygon, get_default_client, reset_default_client
from polyquery.domain.exceptions.polygon import ApiError, PolyqueryError, UnknownOperation
from polyquery.infrastructure.logging.logger import get_json_logger
from polyquery.mcp.schemas.tools import ToolError, ToolRequest, ToolResponse
from polyquery.mcp.tools import call_tool
from polyquery.rest.catalog import CATALOG

log = get_json_logger(__name__)

_UNPROCESSABLE: Final[frozenset[str]] = frozenset(
    {"INVALID_ARGUMENTS", "INVALID_TOOL_CALL", "PARAMETER_VALIDATION_ERROR", "INVALID_TIMESPAN"}
)
_BAD_GATEWAY: Final[frozenset[str]] = frozenset(
    {"API_ERROR", "TRANSPORT_ERROR", "TRANSPORT_TIMEOUT", "DECODE_ERROR"}
)


class HealthResult(BaseModel):
    """Tool server health."""

    model_config = ConfigDict(extra="forbid")

    status: str
    modules: int
    endpoints: int


def tool_error(exc: PolyqueryError) -> ToolError:
    """Render a client error as a :class:`ToolError`."""
    if isinstance(exc, ApiError):
        return ToolError(
            type=exc.code,
            message=exc.message,
            retryable=exc.retryable,
            http_status=exc.status,
            request_id=exc.request_id,
            details=exc.details,
        )
    return ToolError(
        type=exc.code,
        message=str(exc),
        retryable=exc.retryable,
        details=exc.details,
    )


def http_status_for(error: ToolError) -> int:
    """Map an error code to the HTTP status of the adapter."""
    if error.type in _UNPROCESSABLE:
        return 422
    if error.type in _BAD_GATEWAY:
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_500_INTERNAL_SERVER_ERROR


class ToolServer:
    """Dispatches tool calls and wraps outcomes in :class:`ToolResponse` envelopes.

    Routing failures (unknown tool, module or endpoint) are raised so the
    transport layer can answer "not found"; every other client error is
    encoded in ``ToolResponse.error``.
    """

    def __init__(self, client: Polygon | None = None) -> None:
        self._client = client

    @property
    def client(self) -> Polygon:
        """The configured client, or the process-wide default."""
        return self._client if self._client is not None else get_default_client()

    async def call(self, request: ToolRequest | Mapping[str, Any]) -> ToolResponse:
        """Dispatch a single tool call.

        Raises:
            UnknownOperation: If the tool, module or endpoint does not exist.
        """
        try:
            result = await call_tool(self.client, request)
        except UnknownOperation:
            raise
        except PolyqueryError as exc:
            log.warning("tool.failed", extra={"extra": {"error": exc.to_dict()}})
            return ToolResponse(error=tool_error(exc))
        return ToolResponse(result=result)

    def health(self) -> HealthResult:
        return HealthResult(
            status="ok",
            modules=len(CATALOG),
            endpoints=sum(len(endpoints) for endpoints in CATALOG.values()),
        )


# --------------------------------------------------------------------------- #
# FastAPI HTTP adapter
# --------------------------------------------------------------------------- #

tool_server = ToolServer()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Close the process-wide default client on shutdown.

    The default client is built lazily on the first tool call and owns an
    ``httpx.AsyncClient``; it is detached and closed when the app stops.
    """
    yield
    previous = reset_default_client()
    if previous is not None:
        await previous.aclose()
        log.info("tool_server.client_closed")


app = FastAPI(
    title="Polyquery Tool Server",
    version="0.1.0",
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
    lifespan=lifespan,
)


@app.post(
    "/v1/call",
    response_model=ToolResponse,
    status_code=status.HTTP_200_OK,
    summary="Dispatch a tool call.",
)
async def tool_call_http(request: ToolRequest) -> Any:
    """HTTP entrypoint for tool calls.

    Unknown tools, modules and endpoints are surfaced as HTTP 404; other
    failures keep the ``ToolResponse`` envelope with a non-200 status.
    """
    try:
        response = await tool_server.call(request)
    except UnknownOperation as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    if response.error is not None:
        return JSONResponse(
            status_code=http_status_for(response.error),
            content=response.model_dump(mode="json", by_alias=True),
        )
    return response


@app.get(
    "/healthz",
    response_model=HealthResult,
    status_code=status.HTTP_200_OK,
    summary="Tool server health check.",
)
async def health_http() -> HealthResult:
    """HTTP health endpoint for the tool server."""
    return tool_server.health()
