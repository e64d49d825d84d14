# src/polyquery/infrastructure/observability/metrics.py
# Copyright (c) Polyquery.
# SPDX-License-Identifier: MIT
"""Prometheus metrics for polygon.io requests.

Collectors (names are part of the public contract):

* ``polyquery_requests_total`` (Counter; ``endpoint``, ``outcome``)
* ``polyquery_request_latency_seconds`` (Histogram; ``endpoint``, ``outcome``)

``outcome`` is ``ok`` or the error ``code`` of the raised exception (for
example ``API_ERROR`` or ``TRANSPORT_ERROR``).

Collectors are created against the *current* default registry and reused if a
collector with the same name already exists, so re-imports and tests that swap
``prom.REGISTRY`` do not fail with duplicate registrations.
"""

from __future__ import annotations

from collections.abc import Sequence

import prometheus_client as prom
from prometheus_client import Counter, Histogram
from prometheus_client.registry import CollectorRegistry

__all__ = [
    "get_request_latency_seconds",
    "get_requests_total",
    "observe_request",
]

_LABELS: tuple[str, ...] = ("endpoint", "outcome")


def _get_or_create_histogram(
    name: str,
    doc: str,
    labelnames: Sequence[str] | None = None,
) -> Histogram:
    """Return a histogram bound to the current default registry.

    Reuses an existing collector of the same name, and recovers from a
    concurrent ``Duplicated timeseries`` registration the same way.
    """
    registry: CollectorRegistry = prom.REGISTRY
    mapping = getattr(registry, "_names_to_collectors", {})  # internal but stable
    existing = mapping.get(name)
    if isinstance(existing, Histogram):
        return existing

    labels = tuple(labelnames) if labelnames is not None else ()
    try:
        return Histogram(name, doc, labels, registry=registry)
    except ValueError as exc:
        if "Duplicated timeseries" in str(exc):
            again = getattr(registry, "_names_to_collectors", {}).get(name)
            if isinstance(again, Histogram):
                return again
        raise


def _get_or_create_counter(
    name: str,
    doc: str,
    labelnames: Sequence[str] | None = None,
) -> Counter:
    """Counter twin of :func:`_get_or_create_histogram`."""
    registry: CollectorRegistry = prom.REGISTRY
    mapping = getattr(registry, "_names_to_collectors", {})
    # Counters register under both ``name`` and ``name_total``.
    existing = mapping.get(name) or mapping.get(f"{name}_total")
    if isinstance(existing, Counter):
        return existing

    labels = tuple(labelnames) if labelnames is not None else ()
    try:
        return Counter(name, doc, labels, registry=registry)
    except ValueError as exc:
        if "Duplicated timeseries" in str(exc):
            mapping = getattr(registry, "_names_to_collectors", {})
            again = mapping.get(name) or mapping.get(f"{name}_total")
            if isinstance(again, Counter):
                return again
        raise


def get_requests_total() -> Counter:
    """Return the request counter."""
    return _get_or_create_counter(
        "polyquery_requests_total",
        "polygon.io requests by endpoint and outcome.",
        labelnames=_LABELS,
    )


def get_request_latency_seconds() -> Histogram:
    """Return the request latency histogram."""
    return _get_or_create_histogram(
        "polyquery_request_latency_seconds",
        "Latency of polygon.io requests including output processing (seconds).",
        labelnames=_LABELS,
    )


def observe_request(endpoint: str, outcome: str, elapsed_s: float) -> None:
    """Record one finished request."""
    get_requests_total().labels(endpoint, outcome).inc()
    get_request_latency_seconds().labels(endpoint, outcome).observe(max(0.0, elapsed_s))
