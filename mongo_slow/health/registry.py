"""Dependency health registry.

An explicit registry object (one per service, no module-level state) holding
named dependency checks. A background thread runs every check each
interval with a per-check timeout and keeps the latest result per
dependency. A check is a zero-argument callable that returns an optional
state dict when healthy and raises when not.

Every dependency starts unhealthy until its first check completes, and the
registry as a whole reports unhealthy until the checker has started.
"""
from __future__ import annotations

import datetime as _dt
import logging
import threading
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass, field
from typing import Any

from mongo_slow.health.models import CheckHealth, HealthLevel, HealthResponse, state_from_level

logger = logging.getLogger(__name__)

Check = Callable[[], "dict[str, Any] | None"]

STARTING_MESSAGE = "starting (unhealthy by default)"
MIN_CHECK_INTERVAL = 2.0
INTERVAL_SUBTRAHEND = 0.5


def _utc_now() -> str:
    return _dt.datetime.now(_dt.timezone.utc).replace(microsecond=0).isoformat().replace('+00:00', 'Z')


@dataclass
class Dependency:
    name: str
    check: Check
    desc: str = ""
    key: str = field(init=False)

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("dependency name is required")
        if not callable(self.check):
            raise ValueError(f"dependency {self.name!r} check must be callable")
        self.key = self.name.strip().lower()


@dataclass
class HealthStats:
    total: int = 0
    fails: int = 0
    total_checks: int = 0
    total_requests: int = 0
    check_duration_ms: float = 0.0


class HealthRegistry:
    def __init__(self, interval: float = 15.0, timeout: float = 14.0, log_checks: bool = False) -> None:
        if interval < MIN_CHECK_INTERVAL:
            raise ValueError(f"health check interval {interval}s is below minimum {MIN_CHECK_INTERVAL}s")
        self.interval = interval
        self.timeout = min(timeout, interval - INTERVAL_SUBTRAHEND)
        self.log_checks = log_checks
        self.stats = HealthStats()
        self.started_at: str | None = None
        self.last_run_at: str | None = None
        self._deps: dict[str, Dependency] = {}
        self._results: dict[str, CheckHealth] = {}
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._executor: ThreadPoolExecutor | None = None

    def register(self, name: str, check: Check, desc: str = "") -> Dependency:
        dep = Dependency(name=name, check=check, desc=desc)
        with self._lock:
            if dep.key in self._deps:
                raise ValueError(f"dependencies must be unique by name: {dep.key!r}")
            self._deps[dep.key] = dep
            self._results[dep.key] = self._starting(dep)
        return dep

    def dependencies(self) -> list[Dependency]:
        with self._lock:
            return list(self._deps.values())

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        if not self._deps:
            logger.warning("no health dependencies registered")
        self._stop.clear()
        self._executor = ThreadPoolExecutor(max_workers=max(1, len(self._deps)), thread_name_prefix="health-check")
        self.started_at = _utc_now()
        self._thread = threading.Thread(target=self._loop, name="health-checker", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()

    def _loop(self) -> None:
        try:
            while not self._stop.is_set():
                self.run_checks()
                self._stop.wait(self.interval)
        finally:
            if self._executor is not None:
                self._executor.shutdown(wait=False, cancel_futures=True)
                self._executor = None

    def run_checks(self) -> dict[str, CheckHealth]:
        """Run every registered check once and store the results."""
        t0 = time.perf_counter()
        with self._lock:
            self.stats.total_checks += 1
            deps = list(self._deps.values())
        executor = self._executor
        owned = executor is None
        if executor is None:
            executor = ThreadPoolExecutor(max_workers=max(1, len(deps)))
        try:
            futures = {dep.key: (dep, time.perf_counter(), executor.submit(dep.check)) for dep in deps}
            for key, (dep, started, fut) in futures.items():
                remaining = max(0.0, self.timeout - (time.perf_counter() - started))
                try:
                    state = fut.result(timeout=remaining)
                    result = self._result(dep, time.perf_counter() - started, state=state)
                except FutureTimeout:
                    msg = f"health dependency check has timed out after {self.timeout}s"
                    logger.warning("%s: %s", dep.name, msg)
                    result = self._result(dep, self.timeout, error=msg)
                except Exception as e:
                    result = self._result(dep, time.perf_counter() - started, error=str(e) or type(e).__name__)
                    logger.error("unhealthy dependency %s: %s", dep.name, e)
                with self._lock:
                    self._results[key] = result
                    self.stats.total += 1
                    if result.level != HealthLevel.HEALTHY:
                        self.stats.fails += 1
                if self.log_checks:
                    logger.info("health dependency check completed %s status=%s", dep.name, result.status)
        finally:
            if owned:
                executor.shutdown(wait=False)
        with self._lock:
            self.last_run_at = _utc_now()
            self.stats.check_duration_ms = (time.perf_counter() - t0) * 1000.0
            return dict(self._results)

    def response(self) -> HealthResponse:
        with self._lock:
            self.stats.total_requests += 1
            checks = dict(self._results)
        if self.started_at is None:
            level = HealthLevel.CRITICAL
        elif checks:
            level = max(c.level for c in checks.values())
        else:
            level = HealthLevel.HEALTHY
        return HealthResponse(
            timestamp=_utc_now(),
            status=state_from_level(level).value,
            level=level,
            checks=checks,
        )

    def _starting(self, dep: Dependency) -> CheckHealth:
        return CheckHealth(name=dep.name, status="critical", message=STARTING_MESSAGE, details={"desc": dep.desc})

    def _result(self, dep: Dependency, duration: float, state: dict[str, Any] | None = None,
                error: str | None = None) -> CheckHealth:
        details: dict[str, Any] = {"desc": dep.desc, "duration_seconds": round(duration, 6)}
        if state:
            details["state"] = state
        return CheckHealth(
            name=dep.name,
            status="critical" if error else "healthy",
            message=error or "",
            last_check=_utc_now(),
            details=details,
        )


__all__ = ["Dependency", "HealthRegistry", "HealthStats", "STARTING_MESSAGE"]
