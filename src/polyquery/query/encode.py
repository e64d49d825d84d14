# src/polyquery/query/encode.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""Query parameter encoding.

Every supported Python value maps to exactly one query value:

* ``str``, ``bool``, ``int`` and ``float`` pass through (``bool`` is checked
  before ``int``),
* ``None`` becomes :data:`OMIT`, which the serializer drops,
* :class:`SortOrder`, :class:`Limit` and string-valued ``Enum`` members map
  to their wire value (``Limit(None)`` is omitted as well).

Any other type raises ``TypeError``; that is a programming error, not a data
condition.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Any, Final, TypeAlias

import httpx

from polyquery.domain.value_objects import Limit, SortOrder

__all__ = ["OMIT", "QueryValue", "encode", "is_omitted", "render", "serialize"]


class _Omit:
    """Marker for a parameter that must not appear in the query string."""

    _instance: _Omit | None = None

    def __new__(cls) -> _Omit:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "OMIT"

    def __bool__(self) -> bool:
        return False


OMIT: Final[_Omit] = _Omit()

QueryValue: TypeAlias = str | bool | int | float
EncodedValue: TypeAlias = QueryValue | _Omit


def encode(value: Any) -> EncodedValue:
    """Encode a Python value into a query value.

    Args:
        value: Scalar, ``None`` or one of the small value objects.

    Returns:
        The query value, or :data:`OMIT` for absent values.

    Raises:
        TypeError: If ``value`` has an unsupported type.
    """
    if value is None or value is OMIT:
        return OMIT
    if isinstance(value, Enum):
        return encode(value.value)
    if isinstance(value, SortOrder):
        return value.value
    if isinstance(value, Limit):
        return OMIT if value.value is None else value.value
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float | str):
        return value
    raise TypeError(f"Cannot encode query parameter of type {type(value).__name__}")


def is_omitted(value: Any) -> bool:
    """Whether ``value`` is the omit marker."""
    return value is OMIT


def render(value: QueryValue) -> str:
    """Render a query value as its wire string.

    Booleans are lowercase, floats use ``repr`` so they parse back to the
    same float.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return repr(value)
    return str(value)


def serialize(pairs: Iterable[tuple[str, EncodedValue]]) -> str:
    """URL-encode ``(name, value)`` pairs, dropping omitted ones.

    Duplicate names are kept in order.
    """
    kept = [(name, render(value)) for name, value in pairs if value is not OMIT]
    return str(httpx.QueryParams(kept))
