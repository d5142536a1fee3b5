"""Tests for the dependency health registry."""
from __future__ import annotations

import threading
import time

import pytest

from mongo_slow.health import HealthLevel, HealthRegistry
from mongo_slow.health.registry import STARTING_MESSAGE


def _ok():
    return {"ok": 1.0}


def _boom():
    raise RuntimeError("connection refused")


class TestRegister:

    def test_starts_unhealthy(self):
        reg = HealthRegistry(interval=15, timeout=14)
        reg.register("mongo", _ok, "currentOp source")
        resp = reg.response()
        assert resp.level == HealthLevel.CRITICAL
        assert resp.checks["mongo"].status == "critical"
        assert resp.checks["mongo"].message == STARTING_MESSAGE

    def test_duplicate_names_rejected_case_insensitively(self):
        reg = HealthRegistry()
        reg.register("Mongo", _ok)
        with pytest.raises(ValueError):
            reg.register("mongo", _ok)

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError):
            HealthRegistry().register("  ", _ok)

    def test_interval_minimum(self):
        with pytest.raises(ValueError):
            HealthRegistry(interval=1.0)

    def test_timeout_capped_below_interval(self):
        assert HealthRegistry(interval=5, timeout=14).timeout == 4.5
        assert HealthRegistry(interval=15, timeout=3).timeout == 3


class TestRunChecks:

    def test_healthy_check_records_state(self):
        reg = HealthRegistry()
        reg.register("mongo", _ok, "currentOp source")
        results = reg.run_checks()
        assert results["mongo"].status == "healthy"
        assert results["mongo"].details["state"] == {"ok": 1.0}
        assert results["mongo"].details["desc"] == "currentOp source"
        assert results["mongo"].last_check is not None
        assert reg.stats.total == 1
        assert reg.stats.fails == 0
        assert reg.last_run_at is not None

    def test_raising_check_is_critical(self):
        reg = HealthRegistry()
        reg.register("mongo", _boom)
        results = reg.run_checks()
        assert results["mongo"].status == "critical"
        assert results["mongo"].message == "connection refused"
        assert reg.stats.fails == 1

    def test_slow_check_times_out(self):
        release = threading.Event()

        def _slow():
            release.wait(5)

        reg = HealthRegistry(interval=2, timeout=0.05)
        reg.register("slow", _slow)
        try:
            results = reg.run_checks()
        finally:
            release.set()
        assert results["slow"].status == "critical"
        assert "timed out" in results["slow"].message

    def test_response_before_start_is_critical_even_when_checks_pass(self):
        reg = HealthRegistry()
        reg.register("mongo", _ok)
        reg.run_checks()
        assert reg.response().level == HealthLevel.CRITICAL


class TestLifecycle:

    def test_start_runs_checks_and_reports_healthy(self):
        reg = HealthRegistry(interval=2, timeout=1)
        reg.register("mongo", _ok)
        reg.register("poller", _ok)
        reg.start()
        try:
            deadline = time.monotonic() + 5
            while reg.last_run_at is None and time.monotonic() < deadline:
                time.sleep(0.01)
            resp = reg.response()
        finally:
            reg.stop()
        assert resp.level == HealthLevel.HEALTHY
        assert resp.status == "healthy"
        assert reg.started_at is not None
        assert reg.stats.total_requests == 1

    def test_worst_dependency_wins(self):
        reg = HealthRegistry(interval=2, timeout=1)
        reg.register("mongo", _ok)
        reg.register("poller", _boom)
        reg.start()
        try:
            deadline = time.monotonic() + 5
            while reg.last_run_at is None and time.monotonic() < deadline:
                time.sleep(0.01)
            resp = reg.response()
        finally:
            reg.stop()
        assert resp.level == HealthLevel.CRITICAL
        assert resp.checks["mongo"].level == HealthLevel.HEALTHY
