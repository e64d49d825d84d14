# src/polyquery/domain/exceptions/base.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""
Base Domain Exceptions.

Summary:
    Canonical base class for client errors. Every error carries a stable
    ``code`` and a ``details`` mapping so adapters (CLI, tool server) can
    render it deterministically.

Layer:
    domain/exceptions
"""
from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base class for all polyquery exceptions."""

    code: str = "DOMAIN_ERROR"
    retryable: bool = False

    def __init__(self, message: str = "", *, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly representation of the error."""
        return {
            "code": self.code,
            "message": str(self),
            "retryable": self.retryable,
            "details": self.details,
        }
