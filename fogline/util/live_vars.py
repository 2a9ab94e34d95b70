from __future__ import annotations

from collections.abc import Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from time import perf_counter
from typing import NamedTuple

from fogline.config import METRIC_SAMPLE_COUNT
from fogline.types import MetricName, Milliseconds

from .metrics import MostRecentNVar, StatsVar


class MetricSpec(NamedTuple):
    """Definition for a metric to register in batch."""

    name: MetricName
    description: str
    num_samples: int = METRIC_SAMPLE_COUNT


# Per-call metrics recorded by the visibility entry points.
SWEEP_TIME_METRIC = "visibility.sweep_ms"
VIEWPORT_TIME_METRIC = "visibility.viewport_ms"
SEGMENT_COUNT_METRIC = "visibility.segments"

VISIBILITY_METRICS = [
    MetricSpec(SWEEP_TIME_METRIC, "Wall-clock time of one radial sweep (ms)"),
    MetricSpec(VIEWPORT_TIME_METRIC, "Viewport clip plus sweep time (ms)"),
    MetricSpec(SEGMENT_COUNT_METRIC, "Occluders in the sweep after framing"),
]


@dataclass
class Metric:
    """A named statistic exposed for live inspection."""

    name: MetricName
    description: str
    stats_var: StatsVar

    def record_value(self, value: float) -> None:
        self.stats_var.record(value)

    def get_stats_summary(self) -> str:
        if self.stats_var.sample_count == 0:
            return "No samples"
        return self.stats_var.get_percentiles_string()


class MetricRegistry:
    """Registry for all :class:`Metric` instances.

    When ``strict`` is ``True``, recording a metric that has not been
    registered raises ``KeyError``. The registry starts non-strict so the
    visibility functions work without any setup; applications that register
    their metrics up front can switch strict mode on to catch typos.
    """

    def __init__(self) -> None:
        self._metrics: dict[MetricName, Metric] = {}
        self.strict: bool = False

    def register_metric(
        self,
        name: MetricName,
        description: str = "",
        num_samples: int = METRIC_SAMPLE_COUNT,
    ) -> Metric:
        """Register a metric backed by a ring buffer of ``num_samples``."""
        if name in self._metrics:
            raise ValueError(f"Metric '{name}' already registered")
        metric = Metric(
            name=name,
            description=description,
            stats_var=MostRecentNVar(num_samples),
        )
        self._metrics[name] = metric
        return metric

    def register_metrics(self, specs: Sequence[MetricSpec]) -> None:
        """Register multiple metrics from a list of ``MetricSpec`` entries."""
        for spec in specs:
            self.register_metric(
                spec.name, description=spec.description, num_samples=spec.num_samples
            )

    def get_metric(self, name: MetricName) -> Metric | None:
        return self._metrics.get(name)

    def get_all_metrics(self) -> list[Metric]:
        """Return all registered metrics sorted by name."""
        return sorted(self._metrics.values(), key=lambda m: m.name)

    def is_registered(self, name: MetricName) -> bool:
        return name in self._metrics

    def record_metric(self, name: MetricName, value: float) -> None:
        """Record a value to a metric.

        Raises:
            KeyError: If the metric is not registered and the registry is strict.
        """
        metric = self._metrics.get(name)
        if metric is None:
            if self.strict:
                raise KeyError(f"Metric '{name}' is not registered")
            return
        metric.record_value(value)

    def clear(self) -> None:
        self._metrics.clear()


# Global registry instance used throughout the package
metric_registry = MetricRegistry()


def register_visibility_metrics() -> None:
    """Register the sweep metrics on the global registry. Idempotent."""
    missing = [
        spec
        for spec in VISIBILITY_METRICS
        if not metric_registry.is_registered(spec.name)
    ]
    metric_registry.register_metrics(missing)


# Timing helper for recording wall-clock time to a metric.
# Works as both a context manager and a decorator:
#   with record_time(SWEEP_TIME_METRIC): ...
#   @record_time(SWEEP_TIME_METRIC)
@contextmanager
def record_time(metric_name: MetricName):
    """Record elapsed wall-clock time (ms) to the named metric.

    In strict mode a missing metric raises ``KeyError`` once the timed block
    finishes. Otherwise unregistered metrics are skipped.
    """
    start = perf_counter()
    try:
        yield
    finally:
        elapsed_ms = Milliseconds((perf_counter() - start) * 1000)
        metric_registry.record_metric(metric_name, elapsed_ms)
