# tests/unit/query/test_processors.py
from __future__ import annotations

import pandas as pd
import pytest

from polyquery.domain.exceptions.polygon import ApiError, DecodeError
from polyquery.query.processors import Decoder, Raw, Table, to_frame
from polyquery.query.response import TransportResponse

_OK = TransportResponse(
    status=200,
    body='{"status":"OK","results":[{"ticker":"MSFT","v":1.0},{"ticker":"GOOG","v":2.0}]}',
)


def test_raw_returns_body_and_is_idempotent() -> None:
    raw = Raw()
    assert raw.process(_OK) == raw.process(_OK) == _OK.body


def test_decoder_applies_function_to_parsed_json() -> None:
    decoder = Decoder(lambda payload: [row["ticker"] for row in payload["results"]])
    assert decoder.process(_OK) == ["MSFT", "GOOG"]
    assert decoder.process(_OK) == decoder.process(_OK)


def test_decoder_wraps_shape_errors() -> None:
    decoder = Decoder(lambda payload: payload["missing"])
    with pytest.raises(DecodeError, match="Decode error"):
        decoder.process(_OK)


def test_invalid_json_is_a_decode_error() -> None:
    with pytest.raises(DecodeError):
        Decoder(lambda payload: payload).process(TransportResponse(status=200, body="{not json"))


def test_processors_surface_api_errors() -> None:
    failing = TransportResponse(status=401, body='{"error":"bad key"}')
    for processor in (Raw(), Decoder(lambda p: p), Table()):
        with pytest.raises(ApiError):
            processor.process(failing)


def test_table_builds_one_row_per_result() -> None:
    frame = Table().process(_OK)
    assert isinstance(frame, pd.DataFrame)
    assert list(frame["ticker"]) == ["MSFT", "GOOG"]
    pd.testing.assert_frame_equal(frame, Table().process(_OK))


def test_table_requires_results_field() -> None:
    with pytest.raises(DecodeError) as exc_info:
        Table().process(TransportResponse(status=200, body='{"not_results": []}'))
    assert str(exc_info.value) == "Missing 'results' field"


def test_only_table_offloads_by_default() -> None:
    assert Table().offload is True
    assert Raw().offload is False
    assert Decoder(lambda p: p).offload is False


def test_to_frame_accepts_object_and_rejects_scalars() -> None:
    assert len(to_frame({"ticker": "AAPL"})) == 1
    assert to_frame([]).empty
    with pytest.raises(DecodeError):
        to_frame(3)
    with pytest.raises(DecodeError):
        to_frame([1, 2])
