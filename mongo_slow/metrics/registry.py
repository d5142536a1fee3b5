"""Prometheus metric definitions for the exporter.

Metrics
-------
mongo_slow_query_running_milliseconds_total (Counter; user, operation, namespace)
    Slow time accumulated by operations still in flight, per tick delta.
mongo_slow_query_duration_seconds (Histogram; user, operation, namespace)
    Total duration of completed operations above the observation floor.
mongo_slow_poll_ticks_total (Counter)
mongo_slow_parse_failures_total (Counter)
mongo_slow_running_operations (Gauge)
mongo_slow_history_entries (Gauge)
mongo_slow_poll_duration_seconds (Histogram)
    Fetch + reconcile time per tick.

Registration tolerates duplicates: when a collector with the same name is
already registered (module reloads, a second app in one process) the
existing collector is reused.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, Histogram

from mongo_slow.interfaces.metrics_protocol import CounterLike, GaugeLike, HistogramLike
from mongo_slow.metrics.sinks import LABEL_NAMES, PrometheusCounterSink, PrometheusHistogramSink

logger = logging.getLogger(__name__)

DURATION_BUCKETS = (0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0, 600.0, 1800.0, 3600.0)
POLL_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)


def _existing(registry: CollectorRegistry, name: str) -> Any | None:
    try:
        for coll, names in getattr(registry, '_collector_to_names', {}).items():
            if name in names:
                return coll
    except Exception:  # pragma: no cover - prometheus_client internals changed
        logger.debug("could not scan registry for %s", name, exc_info=True)
    return None


def _ensure(factory: type, name: str, doc: str, registry: CollectorRegistry, **kwargs: Any) -> Any:
    try:
        return factory(name, doc, registry=registry, **kwargs)
    except ValueError:  # duplicate
        # Counter names are registered without the _total suffix
        found = _existing(registry, name) or _existing(registry, f"{name}_total")
        if found is None:
            raise
        logger.debug("reusing registered metric %s", name)
        return found


@dataclass
class ExporterMetrics:
    slow_query_millis: CounterLike
    slow_query_duration: HistogramLike
    poll_ticks: CounterLike
    parse_failures: CounterLike
    running_operations: GaugeLike
    history_entries: GaugeLike
    poll_duration: HistogramLike

    @classmethod
    def create(cls, registry: CollectorRegistry = REGISTRY) -> ExporterMetrics:
        return cls(
            slow_query_millis=_ensure(
                Counter, 'mongo_slow_query_running_milliseconds',
                'Milliseconds of slow query time for running operations, according to currentOp',
                registry, labelnames=LABEL_NAMES,
            ),
            slow_query_duration=_ensure(
                Histogram, 'mongo_slow_query_duration_seconds',
                'Duration of completed slow operations, last seen via currentOp',
                registry, labelnames=LABEL_NAMES, buckets=DURATION_BUCKETS,
            ),
            poll_ticks=_ensure(Counter, 'mongo_slow_poll_ticks', 'Completed poll ticks', registry),
            parse_failures=_ensure(
                Counter, 'mongo_slow_parse_failures', 'currentOp entries skipped by the parser', registry,
            ),
            running_operations=_ensure(
                Gauge, 'mongo_slow_running_operations', 'Operations tracked as running after the last tick', registry,
            ),
            history_entries=_ensure(
                Gauge, 'mongo_slow_history_entries', 'Completed slow operations held in history', registry,
            ),
            poll_duration=_ensure(
                Histogram, 'mongo_slow_poll_duration_seconds', 'Fetch and reconcile time per tick',
                registry, buckets=POLL_BUCKETS,
            ),
        )

    def counter_sink(self) -> PrometheusCounterSink:
        return PrometheusCounterSink(self.slow_query_millis)

    def histogram_sink(self) -> PrometheusHistogramSink:
        return PrometheusHistogramSink(self.slow_query_duration)


__all__ = ["ExporterMetrics", "DURATION_BUCKETS", "POLL_BUCKETS"]
