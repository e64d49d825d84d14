"""
Config package export.

Keeps import sites clean and stable:
    from polyquery.config import get_settings, PolyquerySettings
"""

from __future__ import annotations

from .settings import PolyquerySettings, get_settings

__all__ = ["PolyquerySettings", "get_settings"]
