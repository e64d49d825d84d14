# src/polyquery/domain/exceptions/polygon.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""
polygon.io Client Exceptions

Purpose:
    Single error taxonomy for the request pipeline. Callers can tell which
    layer failed (parameter validation, network, upstream API, decoding, or
    tool routing) and whether a retry is worthwhile via ``retryable``.

Layer: domain/exceptions
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .base import DomainError


class PolyqueryError(DomainError):
    """Root of every error raised by the polygon.io client."""

    code = "POLYQUERY_ERROR"


class MissingApiKey(PolyqueryError):
    """No API key is configured on the client."""

    code = "MISSING_API_KEY"

    def __init__(self, message: str = "Missing API key") -> None:
        super().__init__(message)


class ParameterValidationError(PolyqueryError):
    """Supplied query parameters violate the required set or the allow-list."""

    code = "PARAMETER_VALIDATION_ERROR"

    def __init__(
        self,
        message: str,
        *,
        missing: Iterable[str] = (),
        invalid: Iterable[str] = (),
        allowed: Iterable[str] = (),
    ) -> None:
        self.missing: list[str] = sorted(missing)
        self.invalid: list[str] = sorted(invalid)
        self.allowed: list[str] = sorted(allowed)
        details: dict[str, Any] = {}
        if self.missing:
            details["missing"] = self.missing
        if self.invalid:
            details["invalid"] = self.invalid
            details["allowed"] = self.allowed
        super().__init__(message, details=details)

    @classmethod
    def missing_parameters(cls, names: Iterable[str]) -> ParameterValidationError:
        """Build the error raised when required parameters were not supplied."""
        missing = sorted(names)
        return cls(f"Missing required parameters: {missing}", missing=missing)

    @classmethod
    def invalid_parameters(
        cls, names: Iterable[str], allowed: Iterable[str]
    ) -> ParameterValidationError:
        """Build the error raised when parameters fall outside the allow-list."""
        invalid = sorted(names)
        allowed_sorted = sorted(allowed)
        return cls(
            f"Invalid parameters: {invalid}. Allowed parameters: {allowed_sorted}",
            invalid=invalid,
            allowed=allowed_sorted,
        )


class InvalidArguments(ParameterValidationError):
    """A dynamic argument bag does not match an endpoint's parameter table."""

    code = "INVALID_ARGUMENTS"

    def __init__(self, message: str, *, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []
        if self.errors:
            self.details["errors"] = self.errors


class InvalidTimespan(PolyqueryError, ValueError):
    """A timespan string matches none of the accepted spellings."""

    code = "INVALID_TIMESPAN"

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Invalid timespan: {value}", details={"value": value})


class TransportError(PolyqueryError):
    """The HTTP round trip itself failed (DNS, connect, TLS, read)."""

    code = "TRANSPORT_ERROR"
    retryable = True

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message, details={"url": url} if url else None)
        self.url = url


class ApiError(PolyqueryError):
    """polygon.io answered with a non-2xx status."""

    code = "API_ERROR"

    def __init__(self, status: int, message: str, request_id: str | None = None) -> None:
        self.status = status
        self.request_id = request_id
        text = f"API error ({status}): {message}"
        if request_id:
            text += f" [request_id: {request_id}]"
        details: dict[str, Any] = {"status": status}
        if request_id:
            details["request_id"] = request_id
        super().__init__(text, details=details)
        # Keep the upstream message separate from the rendered text.
        self.message = message

    @property
    def retryable(self) -> bool:  # type: ignore[override]
        """Rate limits and server-side failures are worth retrying."""
        return self.status == 429 or self.status >= 500

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApiError):
            return NotImplemented
        return (self.status, self.message, self.request_id) == (
            other.status,
            other.message,
            other.request_id,
        )

    def __hash__(self) -> int:
        return hash((self.status, self.message, self.request_id))


class DecodeError(PolyqueryError):
    """The body was not JSON, or did not have the expected shape."""

    code = "DECODE_ERROR"


class QueryConsumedError(PolyqueryError, RuntimeError):
    """``Query.get`` was awaited twice on the same query."""

    code = "QUERY_CONSUMED"

    def __init__(self, message: str = "Query has already been executed") -> None:
        super().__init__(message)


class UnknownOperation(PolyqueryError):
    """The tool facade was asked for something it does not know."""

    code = "UNKNOWN_OPERATION"


class UnknownModule(UnknownOperation):
    """Module name is not part of the catalog."""

    code = "UNKNOWN_MODULE"

    def __init__(self, module: str) -> None:
        self.module = module
        super().__init__(f"Unknown module: {module}", details={"module": module})


class UnknownEndpoint(UnknownOperation):
    """``(module, endpoint)`` pair is not part of the catalog."""

    code = "UNKNOWN_ENDPOINT"

    def __init__(self, module: str, endpoint: str) -> None:
        self.module = module
        self.endpoint = endpoint
        super().__init__(
            f"Unknown endpoint: {module}::{endpoint}",
            details={"module": module, "endpoint": endpoint},
        )


class UnknownTool(UnknownOperation):
    """Tool name is not one of the meta tools."""

    code = "UNKNOWN_TOOL"

    def __init__(self, tool: str) -> None:
        self.tool = tool
        super().__init__(f"Unknown tool: {tool}", details={"tool": tool})


class InvalidToolCall(PolyqueryError):
    """Tool request envelope is malformed (missing ``tool`` or ``params``)."""

    code = "INVALID_TOOL_CALL"


class TransportTimeout(TransportError, TimeoutError):
    """The transport gave up waiting; still a ``TimeoutError`` for callers."""

    code = "TRANSPORT_TIMEOUT"
