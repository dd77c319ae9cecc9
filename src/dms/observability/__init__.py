"""Observability package for dms.

Key components:
- metrics: Prometheus-style counters and histograms, plus the
  pre-defined :class:`DatastreamMetrics` used by the ops layer

Structured logging lives in :mod:`dms.core.logging`.
"""

from .metrics import (
    Counter,
    DatastreamMetrics,
    Histogram,
    MetricsRegistry,
    counter,
    datastream_metrics,
    get_metrics_registry,
    histogram,
)

__all__ = [
    "MetricsRegistry",
    "Counter",
    "Histogram",
    "DatastreamMetrics",
    "get_metrics_registry",
    "counter",
    "histogram",
    "datastream_metrics",
]
