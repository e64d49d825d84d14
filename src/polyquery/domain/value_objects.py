# src/polyquery/domain/value_objects.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""Small value objects shared by many endpoints.

Purpose:
    ``SortOrder``, ``Timespan`` and ``Limit`` recur across the catalog. Each
    has its own string-coercion policy:

    * ``SortOrder`` keeps unknown strings verbatim (forward compatible with
      new upstream sort values).
    * ``Timespan`` accepts case-insensitive abbreviations and rejects
      anything else with :class:`InvalidTimespan`.
    * ``Limit`` silently falls back to "no limit" when a string does not
      parse as an unsigned 32-bit integer.

Layer:
    domain/value_objects
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Final

from polyquery.domain.exceptions.polygon import InvalidTimespan

__all__ = ["Limit", "SortOrder", "Timespan"]

_U32_MAX: Final[int] = 2**32 - 1
_UNSIGNED_RE: Final[re.Pattern[str]] = re.compile(r"\+?[0-9]+")


@dataclass(frozen=True, slots=True)
class SortOrder:
    """Sort direction, or a custom upstream sort expression.

    Attributes:
        value: Wire value, ``"asc"``, ``"desc"`` or any custom string.
    """

    value: str

    ASC: ClassVar[SortOrder]
    DESC: ClassVar[SortOrder]

    @classmethod
    def parse(cls, value: str | SortOrder) -> SortOrder:
        """Coerce a string into a sort order (never fails)."""
        if isinstance(value, SortOrder):
            return value
        if value == "asc":
            return cls.ASC
        if value == "desc":
            return cls.DESC
        return cls(value)

    @property
    def is_custom(self) -> bool:
        """Whether this is neither ascending nor descending."""
        return self.value not in ("asc", "desc")

    def __str__(self) -> str:
        return self.value


SortOrder.ASC = SortOrder("asc")
SortOrder.DESC = SortOrder("desc")


_TIMESPAN_ALIASES: Final[dict[str, str]] = {
    "minute": "minute",
    "min": "minute",
    "hour": "hour",
    "hr": "hour",
    "h": "hour",
    "day": "day",
    "d": "day",
    "dy": "day",
    "week": "week",
    "w": "week",
    "wk": "week",
    "month": "month",
    "mo": "month",
    "mth": "month",
    "quarter": "quarter",
    "q": "quarter",
    "qrtr": "quarter",
    "qtr": "quarter",
    "year": "year",
    "y": "year",
    "yr": "year",
}


class Timespan(str, Enum):
    """Size of the window used to build aggregate bars."""

    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"

    @classmethod
    def parse(cls, value: str | Timespan) -> Timespan:
        """Parse a timespan leniently.

        Args:
            value: Canonical name or abbreviation (``"wk"``, ``"mo"``, ``"Q"``...).

        Returns:
            The matching member.

        Raises:
            InvalidTimespan: If ``value`` is not a recognized spelling.
        """
        if isinstance(value, Timespan):
            return value
        lowered = value.strip().lower()
        canonical = _TIMESPAN_ALIASES.get(lowered)
        if canonical is None:
            raise InvalidTimespan(lowered)
        return cls(canonical)

    @classmethod
    def _missing_(cls, value: object) -> Timespan | None:
        # Lets pydantic and ``Timespan("wk")`` accept the same aliases as ``parse``.
        if isinstance(value, str):
            canonical = _TIMESPAN_ALIASES.get(value.strip().lower())
            if canonical is not None:
                return cls(canonical)
        return None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Limit:
    """Maximum number of results; ``value is None`` means no limit."""

    value: int | None = None

    NONE: ClassVar[Limit]

    @classmethod
    def from_value(cls, value: Any) -> Limit:
        """Best-effort conversion to a limit.

        Integers in ``0..2**32-1`` are kept. Strings are parsed as unsigned
        decimal integers; anything unparsable becomes "no limit" rather than
        an error. ``None`` also means "no limit".
        """
        if isinstance(value, Limit):
            return value
        if value is None or isinstance(value, bool):
            return cls.NONE
        if isinstance(value, int):
            return cls(value) if 0 <= value <= _U32_MAX else cls.NONE
        if isinstance(value, str):
            if not _UNSIGNED_RE.fullmatch(value):
                return cls.NONE
            parsed = int(value)
            return cls(parsed) if parsed <= _U32_MAX else cls.NONE
        return cls.NONE

    @property
    def is_none(self) -> bool:
        """Whether no numeric limit is set."""
        return self.value is None

    def __int__(self) -> int:
        if self.value is None:
            raise ValueError("Limit has no numeric value")
        return self.value


Limit.NONE = Limit(None)
