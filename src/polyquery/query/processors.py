# src/polyquery/query/processors.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""Output processors.

A processor turns a :class:`TransportResponse` into the value the caller
gets back from :meth:`Query.get`. All three share the status handling in
:func:`raise_for_status`:

* :class:`Raw` returns the body text.
* :class:`Decoder` parses JSON and runs a decode function (typically a
  pydantic ``model_validate``).
* :class:`Table` parses JSON and turns ``results`` into a
  :class:`pandas.DataFrame`.

Processors are stateless, so processing the same response twice yields the
same outcome.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

import pandas as pd

from polyquery.domain.exceptions.polygon import DecodeError
from polyquery.query.response import TransportResponse, raise_for_status

__all__ = ["Decoder", "Processor", "Raw", "Table", "parse_json", "to_frame"]

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class Processor(Protocol[T_co]):
    """Strategy converting a classified response into the caller's output."""

    #: Whether ``process`` is CPU heavy enough to run in a worker thread.
    offload: bool

    def process(self, response: TransportResponse) -> T_co:
        """Return the output for ``response`` or raise a client error."""
        ...


def parse_json(body: str) -> Any:
    """Parse a JSON body, mapping failures to :class:`DecodeError`."""
    try:
        return json.loads(body)
    except ValueError as exc:
        raise DecodeError(f"Decode error: {exc}") from exc


@dataclass(frozen=True, slots=True)
class Raw:
    """Return the body text unchanged."""

    offload: bool = False

    def process(self, response: TransportResponse) -> str:
        return raise_for_status(response)


@dataclass(frozen=True, slots=True)
class Decoder(Generic[T]):
    """Parse JSON, then decode it with ``fn``.

    Attributes:
        fn: Callable receiving the parsed JSON value. ``KeyError``,
            ``TypeError`` and ``ValueError`` (pydantic's ``ValidationError``
            included) raised by it become :class:`DecodeError`.
    """

    fn: Callable[[Any], T]
    offload: bool = False

    def process(self, response: TransportResponse) -> T:
        payload = parse_json(raise_for_status(response))
        try:
            return self.fn(payload)
        except DecodeError:
            raise
        except (KeyError, TypeError, ValueError) as exc:
            raise DecodeError(f"Decode error: {exc}") from exc


@dataclass(frozen=True, slots=True)
class Table:
    """Build a data frame with one row per element of ``results``.

    An object-valued ``results`` produces a single row. Column dtypes are
    inferred by pandas.
    """

    offload: bool = True

    def process(self, response: TransportResponse) -> pd.DataFrame:
        payload = parse_json(raise_for_status(response))
        if not isinstance(payload, dict) or "results" not in payload:
            raise DecodeError("Missing 'results' field")
        return to_frame(payload["results"])


def to_frame(results: Any) -> pd.DataFrame:
    """Convert a JSON ``results`` value to a data frame."""
    if isinstance(results, dict):
        return pd.DataFrame([results])
    if isinstance(results, list):
        if not all(isinstance(row, dict) for row in results):
            raise DecodeError("Decode error: 'results' must contain JSON objects")
        return pd.DataFrame(results)
    raise DecodeError(
        f"Decode error: 'results' must be an array or object, got {type(results).__name__}"
    )
