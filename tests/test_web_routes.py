"""HTTP surface tests using FastAPI's TestClient and a fake snapshot source."""
from __future__ import annotations

import time

import pytest
from fastapi.testclient import TestClient
from prometheus_client import CollectorRegistry

from mongo_slow.config import Settings, load_environment
from mongo_slow.service import ExporterService
from mongo_slow.web.dashboard import create_app
from tests.fixtures import FakeSource, make_raw_op, make_settings


@pytest.fixture
def service():
    source = FakeSource([[make_raw_op(opid=7, micros=6_000_000, user="bob-xyz", command={"find": "users"})]])
    return ExporterService(make_settings(), source, registry=CollectorRegistry())


@pytest.fixture
def client(service):
    # no context manager: lifespan does not run, so nothing is started
    return TestClient(create_app(service))


class TestQueries:

    def test_empty_running(self, client):
        resp = client.get("/queries")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("application/json")
        assert resp.json() == []

    def test_running_after_tick(self, client, service):
        service.poller.tick()
        (row,) = client.get("/queries").json()
        assert row["opid"] == 7
        assert row["effective_user"] == "bob"
        assert row["running_micros"] == 6_000_000
        assert row["delta_micros"] == 6_000_000
        assert row["raw"]["opid"] == 7
        assert '"find"' in row["command"]

    def test_running_table(self, client, service):
        empty = client.get("/queries/table")
        assert empty.status_code == 200
        assert empty.headers["content-type"].startswith("text/html")
        assert "no operations" in empty.text

        service.poller.tick()
        html = client.get("/queries/table").text
        assert "<td>bob</td>" in html
        assert "app.orders" in html
        assert "6.0" in html

    def test_history(self, client, service):
        assert client.get("/history").json() == []
        service.tracker.reconcile([make_raw_op(opid=7, micros=6_000_000, user="bob-xyz")])
        service.tracker.reconcile([])
        (row,) = client.get("/history").json()
        assert row["opid"] == 7
        assert "<td>bob</td>" in client.get("/history/table").text

    def test_reads_do_not_change_state(self, client, service):
        service.poller.tick()
        before = service.tracker.view
        client.get("/queries")
        client.get("/queries/table")
        client.get("/history")
        assert service.tracker.view is before


class TestSystem:

    def test_metrics_exposition(self, client, service):
        service.poller.tick()
        resp = client.get("/metrics")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/plain")
        assert "mongo_slow_query_running_milliseconds_total" in resp.text
        assert 'user="bob"' in resp.text
        assert "mongo_slow_poll_ticks_total 1.0" in resp.text

    def test_health_unhealthy_before_start(self, client):
        resp = client.get("/health")
        assert resp.status_code == 503
        body = resp.json()
        assert body["status"] == "critical"
        assert set(body["checks"]) == {"mongo", "poller"}
        assert body["version"]["version"]

    def test_healthz(self, client, service):
        assert client.get("/healthz").status_code == 503
        service.poller.tick()
        resp = client.get("/healthz")
        assert resp.status_code == 204
        assert resp.content == b""

    def test_info_has_no_credentials(self, client):
        body = client.get("/api/info").json()
        assert body["poll_interval"] == 60.0
        assert body["history_capacity"] == 1000
        assert body["excluded_namespaces"] == ["admin.$cmd"]
        assert body["poller"]["ticks"] == 0
        assert body["poller"]["alive"] is False
        assert "password" not in str(body).lower()

    def test_version(self, client):
        body = client.get("/api/version").json()
        assert set(body) == {"version", "git_hash", "build"}

    def test_request_id_echoed(self, client):
        resp = client.get("/api/version", headers={"X-Request-ID": "abc123"})
        assert resp.headers["X-Request-ID"] == "abc123"
        assert client.get("/api/version").headers["X-Request-ID"]

    def test_root_redirects_to_table(self, client):
        resp = client.get("/", follow_redirects=False)
        assert resp.status_code == 308
        assert resp.headers["location"] == "/queries/table"

    def test_unknown_route_is_json_404(self, client):
        resp = client.get("/nope")
        assert resp.status_code == 404
        assert resp.json()["status_code"] == 404


def test_lifespan_starts_and_stops_service(service):
    with TestClient(create_app(service)) as client:
        deadline = time.monotonic() + 5
        while service.poller.ticks == 0 and time.monotonic() < deadline:
            time.sleep(0.01)
        assert client.get("/healthz").status_code == 204
        assert service.poller.is_alive()
    assert service.poller.stopped


def test_env_file_controls_raw_payload(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("MONGO_SLOW_JSON_INCLUDE_RAW=false\nMONGO_SLOW_HISTORY_CAPACITY=7\n")
    for key in ("MONGO_SLOW_JSON_INCLUDE_RAW", "MONGO_SLOW_HISTORY_CAPACITY", "ENVIRONMENT"):
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)

    load_environment("dev", prog="mongo-slow-queries", root=tmp_path)
    settings = Settings.load()
    svc = ExporterService(settings, FakeSource([[make_raw_op(opid=7, micros=6_000_000)]]),
                          registry=CollectorRegistry())
    svc.poller.tick()
    client = TestClient(create_app(svc))

    assert settings.server.include_raw is False
    assert svc.tracker.history.capacity == 7
    (row,) = client.get("/queries").json()
    assert row["opid"] == 7
    assert "raw" not in row
