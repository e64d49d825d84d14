# src/polyquery/query/response.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""Transport responses and status classification.

Only statuses ``200..299`` are successful. Anything else is turned into an
:class:`ApiError`, extracting ``error``/``message`` and ``request_id`` from
the body when it is JSON. Some upstream error bodies contain two JSON objects
glued together (``{...}{...}``); only the first one is parsed.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from polyquery.domain.exceptions.polygon import ApiError

__all__ = ["TransportResponse", "error_from_response", "is_success", "raise_for_status"]


@dataclass(frozen=True, slots=True)
class TransportResponse:
    """Outcome of one HTTP round trip.

    Attributes:
        status: HTTP status code.
        body: Response body decoded as text.
        request_id: Upstream correlation id, when the transport found one.
    """

    status: int
    body: str
    request_id: str | None = None

    @property
    def ok(self) -> bool:
        """Whether the status is in the success range."""
        return is_success(self.status)


def is_success(status: int) -> bool:
    """Return ``True`` for ``200..299``."""
    return 200 <= status <= 299


def _first_json_object(body: str) -> str:
    boundary = body.find("}{")
    if boundary == -1:
        return body
    return body[: boundary + 1]


def error_from_response(response: TransportResponse) -> ApiError:
    """Build the structured error for a non-2xx response.

    Args:
        response: Response with a failing status.

    Returns:
        ApiError carrying the upstream message and request id when the body
        is a JSON object with an ``error`` or ``message`` string, otherwise a
        generic ``"HTTP {status}: {body}"`` message.
    """
    try:
        payload: Any = json.loads(_first_json_object(response.body))
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        message = payload.get("error")
        if not isinstance(message, str):
            message = payload.get("message")
        if isinstance(message, str):
            request_id = payload.get("request_id")
            if not isinstance(request_id, str):
                request_id = response.request_id
            return ApiError(response.status, message, request_id)

    return ApiError(
        response.status,
        f"HTTP {response.status}: {response.body}",
        response.request_id,
    )


def raise_for_status(response: TransportResponse) -> str:
    """Return the body of a successful response, or raise its ``ApiError``."""
    if response.ok:
        return response.body
    raise error_from_response(response)
