"""Adapters from the tracker's sink contracts to labelled Prometheus metrics."""
from __future__ import annotations

import logging
from collections.abc import Mapping

from mongo_slow.interfaces.metrics_protocol import CounterLike, HistogramLike

logger = logging.getLogger(__name__)

LABEL_NAMES = ("user", "operation", "namespace")


def _label_values(labels: Mapping[str, str]) -> dict[str, str]:
    return {k: labels[k] for k in LABEL_NAMES}


class PrometheusCounterSink:
    """``CounterSink`` backed by a labelled Prometheus counter.

    Prometheus counters are monotonic and ``inc`` rejects negative amounts,
    so a negative value (only reachable with a noise floor below zero) is
    dropped here and logged.
    """

    def __init__(self, counter: CounterLike) -> None:
        self.counter = counter
        self.dropped_negative = 0

    def add(self, value: float, labels: Mapping[str, str]) -> None:
        if value < 0:
            self.dropped_negative += 1
            logger.warning("dropping negative counter increment %s for %s", value, dict(labels))
            return
        self.counter.labels(**_label_values(labels)).inc(value)


class PrometheusHistogramSink:
    def __init__(self, histogram: HistogramLike) -> None:
        self.histogram = histogram

    def observe(self, value: float, labels: Mapping[str, str]) -> None:
        self.histogram.labels(**_label_values(labels)).observe(value)


__all__ = ["LABEL_NAMES", "PrometheusCounterSink", "PrometheusHistogramSink"]
