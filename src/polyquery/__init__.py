"""Typed async client for the polygon.io REST API."""

from __future__ import annotations

from polyquery.client import Polygon, get_default_client, reset_default_client, set_default_client
from polyquery.domain.exceptions.polygon import (
    ApiError,
    DecodeError,
    MissingApiKey,
    ParameterValidationError,
    PolyqueryError,
    TransportError,
)
from polyquery.domain.value_objects import Limit, SortOrder, Timespan
from polyquery.query.builder import Query

__all__ = [
    "ApiError",
    "DecodeError",
    "Limit",
    "MissingApiKey",
    "ParameterValidationError",
    "Polygon",
    "PolyqueryError",
    "Query",
    "SortOrder",
    "Timespan",
    "TransportError",
    "get_default_client",
    "reset_default_client",
    "set_default_client",
]
