"""
Metrics protocols.

The tracker only needs two sink operations, both keyed by the label triple
``{user, operation, namespace}``:

- ``CounterSink.add`` receives milliseconds of slow time for in-flight
  operations.
- ``HistogramSink.observe`` receives the total duration in seconds of a
  completed operation.

Sink calls are fire-and-forget from the tracker's point of view.

``CounterLike``, ``GaugeLike`` and ``HistogramLike`` describe the subset of
``prometheus_client`` metric methods the sinks and the poller call.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable


@runtime_checkable
class CounterSink(Protocol):
    def add(self, value: float, labels: Mapping[str, str]) -> None:
        """Add ``value`` to the counter series identified by ``labels``."""
        ...


@runtime_checkable
class HistogramSink(Protocol):
    def observe(self, value: float, labels: Mapping[str, str]) -> None:
        """Record one observation in the histogram series identified by ``labels``."""
        ...


@runtime_checkable
class CounterLike(Protocol):
    def inc(self, amount: float = 1) -> None: ...
    def labels(self, **labels: str) -> CounterLike: ...


@runtime_checkable
class GaugeLike(Protocol):
    def set(self, value: float) -> None: ...


@runtime_checkable
class HistogramLike(Protocol):
    def observe(self, amount: float) -> None: ...
    def labels(self, **labels: str) -> HistogramLike: ...


__all__ = ["CounterSink", "HistogramSink", "CounterLike", "GaugeLike", "HistogramLike"]
