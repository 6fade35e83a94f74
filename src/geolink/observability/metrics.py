"""
Defines Prometheus metrics for the resolver and the HTTP API.
"""

from __future__ import annotations

from typing import Any, Dict

from prometheus_client import REGISTRY as _PROM_REGISTRY
from prometheus_client import Counter as _OrigCounter
from prometheus_client import Histogram as _OrigHistogram
from prometheus_client import generate_latest

# ---------------------------------------------------------------------------
# Duplicate-safe Prometheus metric wrappers
# ---------------------------------------------------------------------------
# Importing this module more than once (test reloads, uvicorn --reload) must
# not raise duplicate registration errors.


def _duplicate_safe_factory(metric_cls):
    """Return a factory that reuses an existing collector if already present."""

    def _factory(name: str, documentation: str, *args, **kwargs):  # type: ignore[override]
        existing = _PROM_REGISTRY._names_to_collectors.get(name)
        if existing is not None:
            return existing  # type: ignore[return-value]

        try:
            return metric_cls(name, documentation, *args, **kwargs)  # type: ignore[call-arg]
        except ValueError:
            # Registration lost the race: fall back to the now-existing collector.
            return _PROM_REGISTRY._names_to_collectors[name]  # type: ignore[return-value]

    return _factory


Counter = _duplicate_safe_factory(_OrigCounter)  # type: ignore[assignment]
Histogram = _duplicate_safe_factory(_OrigHistogram)  # type: ignore[assignment]


def _create_metrics() -> Dict[str, Any]:
    return {
        "resolutions_total": Counter(
            "geolink_resolutions_total",
            "Total number of URL resolutions by outcome",
            ["outcome"],
        ),
        "strategy_hits_total": Counter(
            "geolink_strategy_hits_total",
            "Number of resolutions whose coordinates came from each strategy",
            ["strategy"],
        ),
        "upstream_requests_total": Counter(
            "geolink_upstream_requests_total",
            "Outbound requests to Google services by API and result",
            ["api", "status"],
        ),
        "resolution_duration_seconds": Histogram(
            "geolink_resolution_duration_seconds",
            "Time taken to resolve a URL end to end",
            buckets=[0.001, 0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
        ),
    }


METRICS: Dict[str, Any] = _create_metrics()


def export_prometheus() -> bytes:
    """Export metrics in Prometheus text format."""
    return generate_latest()
