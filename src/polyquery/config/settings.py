# src/polyquery/config/settings.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""Pydantic settings for the polygon.io client.

Environment variables (with ``model_config.env_prefix``):

* ``POLYGON_API_KEY``
* ``POLYGON_BASE_URL``
* ``POLYGON_TIMEOUT_S``
* ``POLYGON_LOG_LEVEL``
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class PolyquerySettings(BaseSettings):
    """Configuration for the polygon.io REST client."""

    api_key: SecretStr | None = Field(
        None,
        description="polygon.io API key, appended to every request as ``apiKey``.",
    )
    base_url: str = Field(
        "https://api.polygon.io",
        description="Base URL for the polygon.io REST API.",
    )
    timeout_s: float = Field(
        10.0,
        gt=0,
        description="Per-request timeout in seconds for the default transport.",
    )
    log_level: str = Field(
        "INFO",
        description="Root log level used by the CLI and the tool server.",
    )

    model_config: SettingsConfigDict = SettingsConfigDict(
        env_prefix="POLYGON_",
        extra="ignore",
    )

    @property
    def api_key_value(self) -> str | None:
        """Return the raw API key, or ``None`` when unset or blank."""
        if self.api_key is None:
            return None
        value = self.api_key.get_secret_value().strip()
        return value or None


@lru_cache(maxsize=1)
def get_settings() -> PolyquerySettings:
    """Return the cached process-wide settings instance."""
    return PolyquerySettings()
