# src/polyquery/mcp/schemas/tools.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""Tool-calling envelopes.

Purpose:
- Define the request/response shapes of the tool facade: tool descriptors,
  the ``{"tool", "params"}`` request and the text / tabular results.

Layer: adapters/mcp
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ToolDescriptor(BaseModel):
    """A meta tool and the JSON Schema of its ``params`` object."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., description="Tool name (e.g. 'list_endpoints').")
    description: str = Field(..., description="What the tool does.")
    parameters: dict[str, Any] = Field(..., description="JSON Schema for the tool params.")


class ModuleInfo(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    description: str


class EndpointInfo(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    description: str


class ToolRequest(BaseModel):
    """Universal tool call envelope."""

    model_config = ConfigDict(extra="forbid")

    tool: str = Field(..., description="Tool name (see list_tools).")
    params: dict[str, Any] = Field(..., description="Tool-specific parameters object.")


class ColumnSchema(BaseModel):
    """One column of a tabular result."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., description="Key in each data row.")
    alias: str = Field(..., description="Readable column name.")
    dtype: str = Field(..., description="Column dtype (pandas naming).")


class TextResult(BaseModel):
    """Result of a meta tool: JSON rendered as text."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["text"] = "text"
    text: str


class TableResult(BaseModel):
    """Result of ``call_endpoint``: rows, their column schema and envelope metadata."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    kind: Literal["table"] = "table"
    data: Any = Field(..., description="The 'results' member, or the whole body without one.")
    columns: list[ColumnSchema] = Field(
        default_factory=list,
        alias="schema",
        description="Known output columns; empty when the endpoint declares none.",
    )
    metadata: dict[str, Any] | None = Field(
        default=None,
        description="Envelope fields other than 'results' (status, request_id, next_url...).",
    )


ToolCallResult = Annotated[TextResult | TableResult, Field(discriminator="kind")]


class ToolError(BaseModel):
    """Structured error returned by the tool server."""

    model_config = ConfigDict(extra="forbid")

    type: str = Field(..., description="Stable error code (e.g. API_ERROR, UNKNOWN_TOOL).")
    message: str = Field(..., description="Human-readable error message.")
    retryable: bool = Field(..., description="Whether retrying may succeed.")
    http_status: int | None = Field(default=None, description="Upstream HTTP status, if any.")
    request_id: str | None = Field(default=None, description="Upstream request id, if any.")
    details: dict[str, Any] = Field(default_factory=dict)


class ToolResponse(BaseModel):
    """Tool server response: either ``result`` or ``error``."""

    model_config = ConfigDict(extra="forbid")

    result: ToolCallResult | None = None
    error: ToolError | None = None
