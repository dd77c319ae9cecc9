"""Prometheus-style metrics for the datastream management API.

Every request handler shares the same process-wide counters and latency
histograms.  Each metric guards its own state with a lock, so concurrent
increments and observations from any number of request threads are safe.
No cross-metric atomicity is provided or needed: all aggregation is
commutative.

Metric types:
- Counter: Monotonically increasing value
- Histogram: Distribution of values (bucket counts, sum, count, min, max)

Example:
    >>> from dms.observability.metrics import counter, histogram
    >>>
    >>> counter("dms_datastream_get_calls_total").inc()
    >>>
    >>> with histogram("dms_datastream_create_latency_seconds").time():
    ...     do_work()
    >>>
    >>> get_metrics_registry().export_prometheus()
"""

from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from typing import Any


class Metric(ABC):
    """Base class for metrics."""

    metric_type: str = "untyped"

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description
        self._lock = threading.Lock()

    @abstractmethod
    def collect(self) -> dict[str, Any]:
        """Return a point-in-time copy of the metric's state."""
        ...


class Counter(Metric):
    """A monotonically increasing counter (request counts, error counts)."""

    metric_type = "counter"

    def __init__(self, name: str, description: str = ""):
        super().__init__(name, description)
        self._value = 0.0

    def inc(self, value: float = 1.0) -> None:
        """Increment the counter."""
        if value < 0:
            raise ValueError("Counter can only increase")
        with self._lock:
            self._value += value

    @property
    def value(self) -> float:
        with self._lock:
            return self._value

    def collect(self) -> dict[str, Any]:
        return {"name": self.name, "type": self.metric_type, "value": self.value}


class Histogram(Metric):
    """A distribution of observed values, e.g. request latency in seconds."""

    metric_type = "histogram"

    DEFAULT_BUCKETS = (
        0.005,
        0.01,
        0.025,
        0.05,
        0.1,
        0.25,
        0.5,
        1.0,
        2.5,
        5.0,
        10.0,
        float("inf"),
    )

    def __init__(
        self,
        name: str,
        description: str = "",
        buckets: tuple[float, ...] | None = None,
    ):
        super().__init__(name, description)
        self._buckets = tuple(sorted(buckets or self.DEFAULT_BUCKETS))
        if self._buckets[-1] != float("inf"):
            self._buckets = (*self._buckets, float("inf"))
        self._counts = dict.fromkeys(self._buckets, 0)
        self._sum = 0.0
        self._count = 0
        self._min: float | None = None
        self._max: float | None = None

    def observe(self, value: float) -> None:
        """Record an observation."""
        with self._lock:
            self._sum += value
            self._count += 1
            self._min = value if self._min is None else min(self._min, value)
            self._max = value if self._max is None else max(self._max, value)
            for bucket in self._buckets:
                if value <= bucket:
                    self._counts[bucket] += 1

    def time(self) -> Timer:
        """Context manager that observes the duration of a block."""
        return Timer(self)

    @property
    def count(self) -> int:
        with self._lock:
            return self._count

    def collect(self) -> dict[str, Any]:
        with self._lock:
            return {
                "name": self.name,
                "type": self.metric_type,
                "buckets": dict(self._counts),
                "sum": self._sum,
                "count": self._count,
                "min": self._min,
                "max": self._max,
                "mean": self._sum / self._count if self._count else 0.0,
            }


class Timer:
    """Context manager for timing a block into a histogram.

    The duration is only recorded when the block exits without an
    exception.
    """

    def __init__(self, histogram: Histogram):
        self._histogram = histogram
        self._start: float | None = None
        self.elapsed: float | None = None

    def __enter__(self) -> Timer:
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.elapsed = time.perf_counter() - self._start
        if exc_type is None:
            self._histogram.observe(self.elapsed)


class MetricsRegistry:
    """Registry of all metrics for collection and export."""

    def __init__(self):
        self._metrics: dict[str, Metric] = {}
        self._lock = threading.Lock()

    def counter(self, name: str, description: str = "") -> Counter:
        """Get or create a counter."""
        return self._get_or_create(name, Counter, lambda: Counter(name, description))

    def histogram(
        self,
        name: str,
        description: str = "",
        buckets: tuple[float, ...] | None = None,
    ) -> Histogram:
        """Get or create a histogram."""
        return self._get_or_create(name, Histogram, lambda: Histogram(name, description, buckets))

    def _get_or_create(self, name: str, kind: type, factory) -> Any:
        with self._lock:
            metric = self._metrics.get(name)
            if metric is None:
                metric = self._metrics[name] = factory()
            elif not isinstance(metric, kind):
                raise ValueError(f"Metric {name!r} is already registered as a {metric.metric_type}")
            return metric

    def collect(self) -> list[dict[str, Any]]:
        """Collect all metrics."""
        with self._lock:
            metrics = list(self._metrics.values())
        return [metric.collect() for metric in metrics]

    def export_prometheus(self) -> str:
        """Export metrics in Prometheus text format."""
        lines = []
        with self._lock:
            metrics = list(self._metrics.values())

        for metric in metrics:
            data = metric.collect()
            name = data["name"]
            if metric.description:
                lines.append(f"# HELP {name} {metric.description}")
            lines.append(f"# TYPE {name} {metric.metric_type}")

            if metric.metric_type == "counter":
                lines.append(f"{name} {data['value']}")
            elif metric.metric_type == "histogram":
                for bucket, count in data["buckets"].items():
                    le = "+Inf" if bucket == float("inf") else bucket
                    lines.append(f'{name}_bucket{{le="{le}"}} {count}')
                lines.append(f"{name}_sum {data['sum']}")
                lines.append(f"{name}_count {data['count']}")

        return "\n".join(lines) + ("\n" if lines else "")


# Global registry
_default_registry = MetricsRegistry()


def get_metrics_registry() -> MetricsRegistry:
    """Get the default metrics registry."""
    return _default_registry


def counter(name: str, description: str = "") -> Counter:
    """Get or create a counter from the default registry."""
    return _default_registry.counter(name, description)


def histogram(
    name: str,
    description: str = "",
    buckets: tuple[float, ...] | None = None,
) -> Histogram:
    """Get or create a histogram from the default registry."""
    return _default_registry.histogram(name, description, buckets)


class DatastreamMetrics:
    """Pre-defined metrics for the datastream resource operations."""

    def __init__(self, registry: MetricsRegistry | None = None):
        reg = registry or _default_registry
        self.registry = reg

        self.create_calls = reg.counter(
            "dms_datastream_create_calls_total", "Total create datastream calls"
        )
        self.get_calls = reg.counter("dms_datastream_get_calls_total", "Total get datastream calls")
        self.get_all_calls = reg.counter(
            "dms_datastream_get_all_calls_total", "Total list datastreams calls"
        )
        self.delete_calls = reg.counter(
            "dms_datastream_delete_calls_total", "Total delete datastream calls"
        )
        self.update_calls = reg.counter(
            "dms_datastream_update_calls_total", "Total (rejected) update datastream calls"
        )
        self.call_errors = reg.counter(
            "dms_datastream_call_errors_total", "Total failed datastream calls"
        )

        self.create_latency = reg.histogram(
            "dms_datastream_create_latency_seconds",
            "Coordinator initialization + persistence time of successful creates",
        )
        self.delete_latency = reg.histogram(
            "dms_datastream_delete_latency_seconds",
            "Store time of successful deletes",
        )

    def snapshot(self) -> dict[str, Any]:
        """Read-only view of every datastream metric keyed by metric name."""
        snap: dict[str, Any] = {}
        for metric in (
            self.create_calls,
            self.get_calls,
            self.get_all_calls,
            self.delete_calls,
            self.update_calls,
            self.call_errors,
        ):
            snap[metric.name] = metric.value
        for hist in (self.create_latency, self.delete_latency):
            data = hist.collect()
            snap[hist.name] = {
                "count": data["count"],
                "sum": data["sum"],
                "mean": data["mean"],
                "min": data["min"],
                "max": data["max"],
                "buckets": {("+Inf" if b == float("inf") else str(b)): c for b, c in data["buckets"].items()},
            }
        return snap


# Global datastream metrics instance
datastream_metrics = DatastreamMetrics()
