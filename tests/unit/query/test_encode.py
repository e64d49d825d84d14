# tests/unit/query/test_encode.py
from __future__ import annotations

import httpx
import pytest

from polyquery.domain.value_objects import Limit, SortOrder, Timespan
from polyquery.query.encode import OMIT, encode, is_omitted, render, serialize


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("AAPL", "AAPL"),
        (True, True),
        (42, 42),
        (1.5, 1.5),
        (Timespan.WEEK, "week"),
        (SortOrder.DESC, "desc"),
        (SortOrder.parse("ticker"), "ticker"),
        (Limit(10), 10),
    ],
)
def test_encode_maps_supported_values(value: object, expected: object) -> None:
    encoded = encode(value)
    assert encoded == expected
    assert type(encoded) is type(expected)


def test_none_and_empty_limit_are_omitted() -> None:
    assert encode(None) is OMIT
    assert encode(Limit.NONE) is OMIT
    assert is_omitted(encode(None))
    assert not is_omitted(encode(0))


def test_bool_is_not_treated_as_int() -> None:
    assert encode(False) is False
    assert render(False) == "false"
    assert render(True) == "true"


def test_unsupported_type_is_a_type_error() -> None:
    with pytest.raises(TypeError, match="list"):
        encode(["a", "b"])


def test_serialize_drops_omitted_and_parses_back() -> None:
    pairs = [
        ("ticker", encode("BRK.A")),
        ("adjusted", encode(True)),
        ("limit", encode(5000)),
        ("ratio", encode(0.1)),
        ("cursor", encode(None)),
        ("q", encode("a b&c=d")),
    ]

    parsed = httpx.QueryParams(serialize(pairs))

    assert "cursor" not in parsed
    assert parsed["ticker"] == "BRK.A"
    assert parsed["adjusted"] == "true"
    assert int(parsed["limit"]) == 5000
    assert float(parsed["ratio"]) == 0.1
    assert parsed["q"] == "a b&c=d"


def test_serialize_keeps_duplicate_names_in_order() -> None:
    assert serialize([("t", 1), ("x", OMIT), ("t", 2)]) == "t=1&t=2"
