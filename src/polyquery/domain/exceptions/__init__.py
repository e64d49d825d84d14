# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""Exception taxonomy exports."""

from __future__ import annotations

from .base import DomainError
from .polygon import (
    ApiError,
    DecodeError,
    InvalidArguments,
    InvalidTimespan,
    InvalidToolCall,
    MissingApiKey,
    ParameterValidationError,
    PolyqueryError,
    QueryConsumedError,
    TransportError,
    TransportTimeout,
    UnknownEndpoint,
    UnknownModule,
    UnknownOperation,
    UnknownTool,
)

__all__ = [
    "ApiError",
    "DecodeError",
    "DomainError",
    "InvalidArguments",
    "InvalidTimespan",
    "InvalidToolCall",
    "MissingApiKey",
    "ParameterValidationError",
    "PolyqueryError",
    "QueryConsumedError",
    "TransportError",
    "TransportTimeout",
    "UnknownEndpoint",
    "UnknownModule",
    "UnknownOperation",
    "UnknownTool",
]
