# src/polyquery/schemas/responses/base.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""Shared pieces for typed polygon.io response records.

Records treat every field as optional (absent or ``null`` becomes ``None``)
unless a model declares it required. Upstream short keys (``o``, ``h``,
``vw``...) are mapped through aliases; records can also be built from the
Python field names.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, TypeAdapter

from polyquery.domain.exceptions.polygon import DecodeError

M = TypeVar("M", bound=BaseModel)


class PolygonRecord(BaseModel):
    """Base for decoded records: immutable, alias-aware, tolerant of new fields."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )


def results_field(payload: Any) -> Any:
    """Return the ``results`` member of a response envelope.

    Raises:
        DecodeError: If ``payload`` is not an object with ``results``.
    """
    if not isinstance(payload, dict):
        raise DecodeError(f"Decode error: expected a JSON object, got {type(payload).__name__}")
    if "results" not in payload:
        raise DecodeError("Decode error: missing required field 'results'")
    return payload["results"]


def list_decoder(model: type[M]) -> Callable[[Any], list[M]]:
    """Build a decoder turning ``{"results": [...]}`` into ``list[model]``."""
    adapter = TypeAdapter(list[model])  # type: ignore[valid-type]

    def decode(payload: Any) -> list[M]:
        return adapter.validate_python(results_field(payload))

    decode.__name__ = f"decode_{model.__name__.lower()}_list"
    return decode


def object_decoder(model: type[M]) -> Callable[[Any], M]:
    """Build a decoder turning ``{"results": {...}}`` into ``model``."""

    def decode(payload: Any) -> M:
        return model.model_validate(results_field(payload))

    decode.__name__ = f"decode_{model.__name__.lower()}"
    return decode
