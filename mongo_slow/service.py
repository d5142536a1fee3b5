"""Composition of the exporter: metrics, tracker, poller and health registry."""
from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from prometheus_client import REGISTRY, CollectorRegistry

from mongo_slow.config.settings import Settings
from mongo_slow.health.registry import HealthRegistry
from mongo_slow.interfaces import ErrorHandlerProtocol, SnapshotSource
from mongo_slow.metrics.registry import ExporterMetrics
from mongo_slow.orchestrator.poller import PollingLoop
from mongo_slow.tracker.tracker import Tracker

logger = logging.getLogger(__name__)

STALE_INTERVALS = 4
STOP_TIMEOUT = 10.0


class ExporterService:
    def __init__(
        self,
        settings: Settings,
        source: SnapshotSource,
        registry: CollectorRegistry = REGISTRY,
        on_failure: Callable[[BaseException], None] | None = None,
        error_handler: ErrorHandlerProtocol | None = None,
    ) -> None:
        self.settings = settings
        self.source = source
        self.registry = registry
        self.metrics = ExporterMetrics.create(registry)
        self.tracker = Tracker(
            counter=self.metrics.counter_sink(),
            histogram=self.metrics.histogram_sink(),
            settings=settings.tracker,
        )
        self.poller = PollingLoop(
            source,
            self.tracker,
            interval=settings.server.poll_interval,
            metrics=self.metrics,
            on_failure=on_failure,
            error_handler=error_handler,
        )
        self.health = HealthRegistry(interval=settings.server.health_interval, timeout=settings.server.health_timeout)
        self.health.register("mongo", source.ping, "currentOp snapshot source")
        self.health.register("poller", self.poller_state, "currentOp polling loop")

    def start(self) -> None:
        self.poller.start()
        self.health.start()
        logger.info("exporter started (poll_interval=%ss history_capacity=%s)",
                    self.settings.server.poll_interval, self.tracker.history.capacity)

    def stop(self, timeout: float = STOP_TIMEOUT) -> None:
        """Stop the poller and wait up to ``timeout`` seconds for an in-flight tick."""
        self.poller.stop()
        self.poller.join(timeout)
        if self.poller.is_alive():
            logger.warning("poller still running after %.1fs; continuing shutdown", timeout)
        self.health.stop()

    def poller_state(self) -> dict[str, Any]:
        """Health check for the polling loop; raises when it is not healthy."""
        p = self.poller
        if p.failure is not None:
            raise RuntimeError(f"poller terminated: {p.failure}")
        if not p.is_alive():
            raise RuntimeError("poller not running")
        state: dict[str, Any] = {"ticks": p.ticks, "last_tick_at": p.last_tick_at}
        if p.last_tick_at is not None:
            age = time.time() - p.last_tick_at
            state["age_seconds"] = round(age, 3)
            if age > p.interval * STALE_INTERVALS:
                raise RuntimeError(f"poller stale: last tick {age:.1f}s ago")
        return state


__all__ = ["ExporterService", "STALE_INTERVALS", "STOP_TIMEOUT"]
