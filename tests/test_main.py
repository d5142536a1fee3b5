"""Tests for the command-line entry point."""
from __future__ import annotations

from unittest.mock import Mock, call, patch

import pytest

from mongo_slow import main as cli
from mongo_slow.config.settings import Settings
from mongo_slow.errors import SnapshotFetchError
from tests.fixtures import FakeSource

MONGO_VARS = ("MONGO_URI", "MONGO_USER", "MONGO_PASS", "MONGO_HOST", "MONGO_PORT", "PORT", "DEBUG")


@pytest.fixture(autouse=True)
def _quiet_startup(monkeypatch):
    for key in MONGO_VARS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    with patch.object(cli, "load_environment") as load_env, patch.object(cli, "setup_logging"):
        yield load_env


def test_flags_override_environment(monkeypatch):
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("MONGO_HOST", "env-host")
    args = cli.build_parser().parse_args(
        ["--port", "9100", "-d", "--mongo-host", "flag-host", "--mongo-port", "27018", "--interval", "0.01"])
    s = cli.apply_overrides(Settings.load(), args)
    assert s.server.port == 9100
    assert s.server.debug is True
    assert s.server.poll_interval == 0.1
    assert s.mongo.host == "flag-host"
    assert s.mongo.port == 27018


def test_unset_flags_keep_environment(monkeypatch):
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("MONGO_URI", "mongodb://env:27017")
    s = cli.apply_overrides(Settings.load(), cli.build_parser().parse_args([]))
    assert s.server.port == 9000
    assert s.server.debug is False
    assert s.mongo.uri == "mongodb://env:27017"


def test_version_exits_zero(_quiet_startup):
    with patch.object(cli, "log_version") as log_version:
        assert cli.main(["-v", "-e", "prod"]) == 0
    log_version.assert_called_once_with()
    _quiet_startup.assert_called_once_with("prod")


def test_missing_connection_settings_exit_one():
    with patch.object(cli.MongoSnapshotSource, "connect") as connect:
        assert cli.main(["--mongo-user", "svc", "--mongo-host", "db"]) == 1
    connect.assert_not_called()


def test_connect_failure_exits_one():
    with patch.object(cli.MongoSnapshotSource, "connect", side_effect=SnapshotFetchError("no servers")):
        assert cli.main(["--mongo-uri", "mongodb://db:27017"]) == 1


def test_serves_until_server_returns():
    source = FakeSource()
    with patch.object(cli.MongoSnapshotSource, "connect", return_value=source), \
            patch.object(cli.uvicorn, "Server") as server_cls:
        assert cli.main(["--mongo-uri", "mongodb://db:27017", "--port", "9101"]) == 0
    config = server_cls.call_args.args[0]
    assert config.port == 9101
    server_cls.return_value.run.assert_called_once_with()
    assert source.closed


def test_logging_configured_before_environment_load(monkeypatch, tmp_path):
    monkeypatch.setenv("MONGO_SLOW_LOG_DIR", str(tmp_path))
    calls = Mock()
    with patch.object(cli, "setup_logging", calls.setup_logging), \
            patch.object(cli, "load_environment", calls.load_environment), \
            patch.object(cli, "log_version"):
        assert cli.main(["-v", "-e", "prod"]) == 0
    assert calls.mock_calls == [
        call.setup_logging("INFO"),
        call.load_environment("prod"),
        call.setup_logging("INFO", log_dir=str(tmp_path)),
    ]
