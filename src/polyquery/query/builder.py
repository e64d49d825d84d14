# src/polyquery/query/builder.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""Request builder.

A :class:`Query` accumulates parameters for one polygon.io request and is
executed once with :meth:`Query.get`:

    bars = await (
        aggs.aggregates(client, "AAPL", 1, Timespan.DAY, "2024-01-01", "2024-01-05")
        .param("limit", 500)
        .decoded()
        .get()
    )

Parameters are an ordered list of ``(name, value)`` pairs; repeating a name
sends it twice. ``require`` and ``optional`` build the allow-list. When
neither was called every name is accepted.

Switching the output processor (``raw``, ``decoded``, ``with_decoder``,
``as_dataframe``) returns a new query carrying the same parameters,
required names and allow-list.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, Final, Generic, TypeVar

from polyquery.domain.exceptions.polygon import (
    MissingApiKey,
    ParameterValidationError,
    PolyqueryError,
    QueryConsumedError,
    TransportError,
)
from polyquery.infrastructure.logging.logger import get_json_logger, redact_api_key
from polyquery.infrastructure.observability.metrics import observe_request
from polyquery.infrastructure.observability.tracing import traced
from polyquery.query.encode import OMIT, EncodedValue, encode, serialize
from polyquery.query.processors import Decoder, Processor, Raw, Table
from polyquery.query.response import TransportResponse

if TYPE_CHECKING:
    import pandas as pd

    from polyquery.client import Polygon

__all__ = ["API_KEY_PARAM", "Query"]

API_KEY_PARAM: Final[str] = "apiKey"

T = TypeVar("T")
U = TypeVar("U")

log = get_json_logger(__name__)


class Query(Generic[T]):
    """Single-use builder for one GET request.

    Attributes:
        client: Client supplying the API key and transport.
        url: Absolute URL without query string.
        endpoint: Label used for logs, metrics and spans (e.g. ``"Aggs.aggregates"``).
        processor: Output processor applied to the response.
    """

    def __init__(
        self,
        client: Polygon,
        url: str,
        *,
        endpoint: str = "custom",
        processor: Processor[T] | None = None,
        default_decoder: Callable[[Any], Any] | None = None,
    ) -> None:
        self.client = client
        self.url = url
        self.endpoint = endpoint
        self.processor: Processor[T] = (
            processor if processor is not None else Raw()  # type: ignore[assignment]
        )
        self._default_decoder = default_decoder
        self._params: list[tuple[str, EncodedValue]] = []
        self._required: set[str] = set()
        self._allowed: set[str] = set()
        self._consumed = False

    def __repr__(self) -> str:
        return (
            f"Query(endpoint={self.endpoint!r}, url={self.url!r}, "
            f"params={self.param_names()!r}, processor={type(self.processor).__name__})"
        )

    # ------------------------------------------------------------------ #
    # Accumulation
    # ------------------------------------------------------------------ #

    def param(self, name: str, value: Any) -> Query[T]:
        """Append one parameter; ``None`` values are kept but never sent."""
        self._params.append((name, encode(value)))
        return self

    def params(self, pairs: Iterable[tuple[str, Any]]) -> Query[T]:
        """Append several parameters in order."""
        for name, value in pairs:
            self.param(name, value)
        return self

    def require(self, name: str) -> Query[T]:
        """Mark ``name`` as mandatory (and allowed)."""
        self._required.add(name)
        self._allowed.add(name)
        return self

    def optional(self, name: str) -> Query[T]:
        """Mark ``name`` as allowed but not mandatory."""
        self._allowed.add(name)
        return self

    @property
    def required(self) -> frozenset[str]:
        return frozenset(self._required)

    @property
    def allowed(self) -> frozenset[str]:
        return frozenset(self._allowed)

    @property
    def pairs(self) -> list[tuple[str, EncodedValue]]:
        """Parameters in insertion order, omitted values included."""
        return list(self._params)

    def param_names(self) -> list[str]:
        """Names of parameters that will be sent, in order."""
        return [name for name, value in self._params if value is not OMIT]

    # ------------------------------------------------------------------ #
    # Output processor selection
    # ------------------------------------------------------------------ #

    def _evolve(self, processor: Processor[U]) -> Query[U]:
        other: Query[U] = Query(
            self.client,
            self.url,
            endpoint=self.endpoint,
            processor=processor,
            default_decoder=self._default_decoder,
        )
        other._params = list(self._params)
        other._required = set(self._required)
        other._allowed = set(self._allowed)
        return other

    def raw(self) -> Query[str]:
        """Return the body text."""
        return self._evolve(Raw())

    def with_decoder(self, fn: Callable[[Any], U]) -> Query[U]:
        """Decode the parsed JSON body with ``fn``."""
        return self._evolve(Decoder(fn))

    def decoded(self) -> Query[Any]:
        """Decode with the endpoint's default typed decoder.

        Raises:
            ValueError: If the query was not created from a catalog endpoint.
        """
        if self._default_decoder is None:
            raise ValueError(f"No default decoder for endpoint {self.endpoint!r}")
        return self._evolve(Decoder(self._default_decoder))

    def as_dataframe(self) -> Query[pd.DataFrame]:
        """Return ``results`` as a :class:`pandas.DataFrame`."""
        return self._evolve(Table())

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #

    def _build_url(self, api_key: str) -> str:
        supplied = set(self.param_names())

        missing = self._required - supplied
        if missing:
            raise ParameterValidationError.missing_parameters(missing)

        if self._allowed:
            invalid = supplied - self._allowed - {API_KEY_PARAM}
            if invalid:
                raise ParameterValidationError.invalid_parameters(invalid, self._allowed)

        query = serialize([*self._params, (API_KEY_PARAM, api_key)])
        separator = "&" if "?" in self.url else "?"
        return f"{self.url}{separator}{query}"

    async def _send(self, url: str) -> TransportResponse:
        try:
            return await self.client.transport.get(url)
        except (PolyqueryError, asyncio.CancelledError, TimeoutError):
            raise
        except Exception as exc:
            raise TransportError(
                redact_api_key(f"HTTP request error: {exc}"), url=redact_api_key(url)
            ) from exc

    async def get(self) -> T:
        """Execute the request and return the processor's output.

        Returns:
            The processed output (text, decoded value or data frame).

        Raises:
            QueryConsumedError: If this query was already executed.
            MissingApiKey: If the client has no API key.
            ParameterValidationError: If a required parameter is missing or a
                parameter is outside the allow-list.
            TransportError: If the HTTP round trip failed.
            ApiError: If polygon.io answered with a non-2xx status.
            DecodeError: If the body could not be parsed or decoded.
        """
        if self._consumed:
            raise QueryConsumedError()
        self._consumed = True

        api_key = self.client.api_key
        if not api_key:
            raise MissingApiKey()

        url = self._build_url(api_key)
        safe_url = redact_api_key(url)
        started = time.perf_counter()
        outcome = "ok"
        log.debug(
            "polygon.request",
            extra={"extra": {"endpoint": self.endpoint, "url": safe_url}},
        )
        try:
            async with traced(
                f"polygon.{self.endpoint}", endpoint=self.endpoint, url=safe_url
            ) as span:
                response = await self._send(url)
                span.set_attribute("http.status_code", response.status)
                log.info(
                    "polygon.response",
                    extra={
                        "extra": {
                            "endpoint": self.endpoint,
                            "status": response.status,
                            "upstream_request_id": response.request_id,
                            "elapsed_ms": round((time.perf_counter() - started) * 1000, 2),
                        }
                    },
                )
                if self.processor.offload:
                    return await asyncio.to_thread(self.processor.process, response)
                return self.processor.process(response)
        except PolyqueryError as exc:
            outcome = exc.code
            log.warning(
                "polygon.error",
                extra={
                    "extra": {
                        "endpoint": self.endpoint,
                        "url": safe_url,
                        "code": exc.code,
                        "retryable": exc.retryable,
                        "error": str(exc),
                    }
                },
            )
            raise
        except (asyncio.CancelledError, TimeoutError) as exc:
            outcome = type(exc).__name__
            raise
        finally:
            observe_request(self.endpoint, outcome, time.perf_counter() - started)
