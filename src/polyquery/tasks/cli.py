# src/polyquery/tasks/cli.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""Polyquery CLI: browse the endpoint catalog and call endpoints.

Commands:
    tools                          List the meta tools and their parameter schemas.
    modules                        List the API modules.
    endpoints MODULE               List the endpoints of a module.
    schema MODULE ENDPOINT         Print the JSON Schema of an endpoint's arguments.
    call MODULE ENDPOINT --args    Call an endpoint with JSON arguments.

Environment:
    POLYGON_API_KEY     polygon.io API key (required by ``call``).
    POLYGON_BASE_URL    API root (default https://api.polygon.io).
    POLYGON_TIMEOUT_S   Per-request timeout in seconds.
    POLYGON_LOG_LEVEL   Root log level.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

import typer

from polyquery.client import get_default_client, reset_default_client
from polyquery.domain.exceptions.polygon import PolyqueryError
from polyquery.infrastructure.logging.logger import configure_root_logging, get_json_logger
from polyquery.mcp.schemas.tools import TableResult
from polyquery.mcp.tools import (
    call_endpoint,
    get_endpoint_schema,
    list_endpoints,
    list_modules,
    list_tools,
)
from polyquery.query.processors import to_frame

configure_root_logging()
log = get_json_logger(__name__)

app = typer.Typer(add_completion=False, no_args_is_help=True)


def _echo_json(value: Any) -> None:
    typer.echo(json.dumps(value, indent=2, ensure_ascii=False, default=str))


def _fail(exc: PolyqueryError) -> typer.Exit:
    typer.echo(f"error: {exc}", err=True)
    return typer.Exit(code=1)


@app.command("tools")
def tools_cmd() -> None:
    """List the meta tools."""
    _echo_json([tool.model_dump() for tool in list_tools()])


@app.command("modules")
def modules_cmd() -> None:
    """List the API modules."""
    _echo_json([module.model_dump() for module in list_modules()])


@app.command("endpoints")
def endpoints_cmd(module: str = typer.Argument(..., help="Module name.")) -> None:  # noqa: B008
    """List the endpoints of MODULE."""
    try:
        endpoints = list_endpoints(module)
    except PolyqueryError as exc:
        raise _fail(exc) from exc
    _echo_json([endpoint.model_dump() for endpoint in endpoints])


@app.command("schema")
def schema_cmd(
    module: str = typer.Argument(..., help="Module name."),  # noqa: B008
    endpoint: str = typer.Argument(..., help="Endpoint name."),  # noqa: B008
) -> None:
    """Print the argument schema of MODULE ENDPOINT."""
    try:
        schema = get_endpoint_schema(module, endpoint)
    except PolyqueryError as exc:
        raise _fail(exc) from exc
    _echo_json(schema)


@app.command("call")
def call_cmd(
    module: str = typer.Argument(..., help="Module name."),  # noqa: B008
    endpoint: str = typer.Argument(..., help="Endpoint name."),  # noqa: B008
    args: str = typer.Option("{}", "--args", help="Endpoint arguments as a JSON object."),  # noqa: B008
    table: bool = typer.Option(False, "--table", help="Render rows as a table."),  # noqa: B008
) -> None:
    """Call MODULE ENDPOINT with ``--args`` and print the result."""
    try:
        arguments = json.loads(args)
    except json.JSONDecodeError as exc:
        typer.echo(f"error: --args is not valid JSON: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    if not isinstance(arguments, dict):
        typer.echo("error: --args must be a JSON object", err=True)
        raise typer.Exit(code=2)

    async def _run() -> TableResult:
        client = get_default_client()
        try:
            return await call_endpoint(client, module, endpoint, arguments)
        finally:
            # The CLI owns the process-wide client for the duration of one command.
            if reset_default_client() is client:
                await client.aclose()

    try:
        result = asyncio.run(_run())
    except PolyqueryError as exc:
        log.error("cli.call.failed", extra={"extra": {"error": exc.to_dict()}})
        raise _fail(exc) from exc

    log.info(
        "cli.call.done",
        extra={"extra": {"module": module, "endpoint": endpoint}},
    )
    if table:
        try:
            frame = to_frame(result.data)
        except PolyqueryError as exc:
            raise _fail(exc) from exc
        typer.echo(frame.to_string(index=False))
        return
    _echo_json(result.model_dump(mode="json", by_alias=True))


if __name__ == "__main__":
    app()
