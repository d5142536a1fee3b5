"""Tests for JSON log formatting and one-time logging setup."""
from __future__ import annotations

import io
import json
import logging
import logging.handlers

import pytest

from mongo_slow.utils.logging_utils import JsonFormatter, setup_logging


@pytest.fixture
def clean_root():
    root = logging.getLogger()
    saved = (list(root.handlers), root.level, getattr(root, "_mongo_slow_configured", None))
    yield root
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in saved[0]:
        root.addHandler(h)
    root.setLevel(saved[1])
    if saved[2] is None:
        root.__dict__.pop("_mongo_slow_configured", None)
    else:
        root._mongo_slow_configured = saved[2]
    logging.getLogger("uvicorn.access").disabled = False


def _record(msg="operation still running opid=%s", args=(7,), **extra):
    rec = logging.LogRecord("mongo_slow.tracker", logging.INFO, __file__, 1, msg, args, None)
    for k, v in extra.items():
        setattr(rec, k, v)
    return rec


def test_json_formatter_fields():
    out = json.loads(JsonFormatter().format(_record(path="/queries", status=200, cid="abc")))
    assert out["msg"] == "operation still running opid=7"
    assert out["level"] == "INFO"
    assert out["logger"] == "mongo_slow.tracker"
    assert out["path"] == "/queries"
    assert out["status"] == 200
    assert out["cid"] == "abc"
    assert out["ts"].endswith("Z")


def test_json_formatter_omits_missing_extras():
    out = json.loads(JsonFormatter().format(_record()))
    assert "path" not in out
    assert "exc" not in out


def test_setup_logging_stream_and_file(clean_root, tmp_path):
    clean_root.__dict__.pop("_mongo_slow_configured", None)
    stream = io.StringIO()
    setup_logging("DEBUG", log_dir=str(tmp_path / "logs"), stream=stream)
    logging.getLogger("mongo_slow.test").debug("poll tick %s", 3)

    line = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert line["msg"] == "poll tick 3"
    for h in clean_root.handlers:
        h.flush()
    assert "poll tick 3" in (tmp_path / "logs" / "mongo-slow-queries.json.log").read_text()
    assert logging.getLogger("uvicorn.access").disabled


def test_setup_logging_is_idempotent(clean_root):
    clean_root.__dict__.pop("_mongo_slow_configured", None)
    setup_logging("INFO", stream=io.StringIO())
    handlers = list(clean_root.handlers)
    setup_logging("WARNING", stream=io.StringIO())
    assert clean_root.handlers == handlers
    assert clean_root.level == logging.WARNING


def test_later_call_adds_file_handler_once(clean_root, tmp_path):
    clean_root.__dict__.pop("_mongo_slow_configured", None)
    stream = io.StringIO()
    setup_logging("INFO", stream=stream)
    logging.getLogger("mongo_slow.config").info("environment %s loaded", "prod")

    log_dir = str(tmp_path / "logs")
    setup_logging("DEBUG", log_dir=log_dir)
    setup_logging("DEBUG", log_dir=log_dir)
    file_handlers = [h for h in clean_root.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
    assert len(file_handlers) == 1
    assert clean_root.level == logging.DEBUG

    logging.getLogger("mongo_slow.test").debug("poll tick %s", 1)
    file_handlers[0].flush()
    assert "poll tick 1" in (tmp_path / "logs" / "mongo-slow-queries.json.log").read_text()
    assert "environment prod loaded" in stream.getvalue()
