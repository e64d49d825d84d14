# tests/unit/config/test_polyquery_settings.py
from __future__ import annotations

import pytest
from pydantic import ValidationError

from polyquery.config import PolyquerySettings, get_settings


def test_settings_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POLYGON_API_KEY", "  env-key  ")
    monkeypatch.setenv("POLYGON_BASE_URL", "https://proxy.internal/polygon")
    monkeypatch.setenv("POLYGON_TIMEOUT_S", "2.5")

    s = PolyquerySettings()

    assert s.api_key_value == "env-key"
    assert s.base_url == "https://proxy.internal/polygon"
    assert s.timeout_s == 2.5
    assert "env-key" not in repr(s)


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("POLYGON_API_KEY", "POLYGON_BASE_URL", "POLYGON_TIMEOUT_S", "POLYGON_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    s = PolyquerySettings()

    assert s.api_key_value is None
    assert s.base_url == "https://api.polygon.io"
    assert s.timeout_s == 10.0
    assert s.log_level == "INFO"


def test_blank_key_counts_as_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POLYGON_API_KEY", "   ")
    assert PolyquerySettings().api_key_value is None


def test_timeout_must_be_positive(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POLYGON_TIMEOUT_S", "0")
    with pytest.raises(ValidationError):
        PolyquerySettings()


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()
