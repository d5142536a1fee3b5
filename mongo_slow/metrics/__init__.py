"""Prometheus metrics and tracker sink adapters."""

from .registry import ExporterMetrics
from .sinks import LABEL_NAMES, PrometheusCounterSink, PrometheusHistogramSink

__all__ = [
    "ExporterMetrics",
    "LABEL_NAMES",
    "PrometheusCounterSink",
    "PrometheusHistogramSink",
]
