"""Polling loop driving the tracker.

One daemon thread runs fetch -> reconcile -> wait, strictly in sequence, so
the tracker's working state has a single writer. ``stop()`` wakes the wait
immediately; a fetch that is already in flight is allowed to finish, and an
error it raises after shutdown was requested is not treated as a failure.

A fetch failure ends the loop. There is no retry here: the failure is
recorded, routed to the error handler and handed to ``on_failure`` so the
process can shut down.
"""
from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from mongo_slow.errors.facade import resolve_error_handler
from mongo_slow.interfaces.error_handler_protocol import ErrorCategory, ErrorSeverity
from mongo_slow.interfaces.snapshot_protocol import SnapshotSource
from mongo_slow.tracker.tracker import ReconcileResult, Tracker

if TYPE_CHECKING:
    from mongo_slow.interfaces import ErrorHandlerProtocol
    from mongo_slow.metrics.registry import ExporterMetrics

logger = logging.getLogger(__name__)


class PollingLoop:
    def __init__(
        self,
        source: SnapshotSource,
        tracker: Tracker,
        interval: float = 5.0,
        metrics: ExporterMetrics | None = None,
        on_failure: Callable[[BaseException], None] | None = None,
        error_handler: ErrorHandlerProtocol | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.source = source
        self.tracker = tracker
        self.interval = interval
        self.metrics = metrics
        self.on_failure = on_failure
        self.error_handler = error_handler
        self.clock = clock
        self.failure: BaseException | None = None
        self.last_result: ReconcileResult | None = None
        self.last_tick_at: float | None = None
        self.ticks = 0
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self.run, name="mongo-slow-poller", daemon=True)

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def start(self) -> None:
        if not self._thread.is_alive():
            self._thread.start()

    def stop(self) -> None:
        self._stop.set()

    def join(self, timeout: float | None = None) -> None:
        if self._thread.is_alive():
            self._thread.join(timeout)

    def tick(self) -> ReconcileResult:
        """Run one fetch + reconcile. Fetch errors propagate."""
        t0 = time.perf_counter()
        snapshot = self.source.fetch()
        now = self.clock()
        result = self.tracker.reconcile(snapshot, now=now)
        self.ticks += 1
        self.last_tick_at = now
        self.last_result = result
        self._record(result, time.perf_counter() - t0)
        return result

    def run(self) -> None:
        logger.info("poller started (interval=%ss)", self.interval)
        while not self._stop.is_set():
            try:
                self.tick()
            except Exception as e:
                if self._stop.is_set():
                    logger.info("poller fetch interrupted by shutdown: %s", e)
                    break
                self._fail(e)
                return
            self._stop.wait(self.interval)
        logger.info("poller stopped after %d tick(s)", self.ticks)

    def _fail(self, error: Exception) -> None:
        self.failure = error
        self._stop.set()
        resolve_error_handler(self.error_handler).handle_error(
            error,
            category=ErrorCategory.DATABASE,
            severity=ErrorSeverity.HIGH,
            component="orchestrator.poller",
            function_name="run",
            message="snapshot fetch failed; poller terminated",
            context={"ticks": self.ticks},
        )
        if self.on_failure is not None:
            self.on_failure(error)

    def _record(self, result: ReconcileResult, elapsed: float) -> None:
        m = self.metrics
        if m is None:
            return
        m.poll_ticks.inc()
        if result.parse_failures:
            m.parse_failures.inc(result.parse_failures)
        m.running_operations.set(len(self.tracker.view.records))
        m.history_entries.set(len(self.tracker.history))
        m.poll_duration.observe(elapsed)


__all__ = ["PollingLoop"]
