"""Structured (JSON) logging setup.

One JSON object per line: ``ts``, ``level``, ``msg``, ``logger`` plus any
request fields attached through ``extra=`` by the access-log middleware.
Lines go to stdout and, when a log directory is configured, to a rotating
file as well.
"""
from __future__ import annotations

import datetime as _dt
import json as _json
import logging
import logging.handlers
import os
import sys
from typing import Any

EXTRA_FIELDS = ("path", "method", "status", "dur_ms", "cid", "client_ip", "user_agent", "size")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        try:
            payload: dict[str, Any] = {
                "ts": _dt.datetime.now(_dt.timezone.utc).replace(microsecond=0).isoformat().replace('+00:00', 'Z'),
                "level": record.levelname,
                "msg": record.getMessage(),
                "logger": record.name,
            }
            for k in EXTRA_FIELDS:
                v = getattr(record, k, None)
                if v is not None:
                    payload[k] = v
            if record.exc_info:
                payload["exc"] = self.formatException(record.exc_info)
            return _json.dumps(payload, ensure_ascii=False, default=str)
        except Exception:
            return super().format(record)


def _add_file_handler(root: logging.Logger, log_dir: str, filename: str) -> None:
    path = os.path.abspath(os.path.join(log_dir, filename))
    for h in root.handlers:
        if isinstance(h, logging.handlers.RotatingFileHandler) and h.baseFilename == path:
            return
    try:
        os.makedirs(log_dir, exist_ok=True)
        fh = logging.handlers.RotatingFileHandler(path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8")
    except OSError as e:
        root.warning("file logging disabled, cannot use %s: %s", log_dir, e)
        return
    fh.setFormatter(JsonFormatter())
    root.addHandler(fh)


def setup_logging(level: str | int = "INFO", log_dir: str = "", filename: str = "mongo-slow-queries.json.log",
                  stream=None) -> logging.Logger:
    """Configure the root logger.

    The first call installs the stdout handler and reroutes uvicorn's loggers.
    Later calls adjust the level and add the rotating file handler for
    ``log_dir`` if it is not installed yet.
    """
    root = logging.getLogger()
    root.setLevel(level)
    if getattr(root, "_mongo_slow_configured", False):
        if log_dir:
            _add_file_handler(root, log_dir, filename)
        return root

    for h in list(root.handlers):
        root.removeHandler(h)

    sh = logging.StreamHandler(stream or sys.stdout)
    sh.setFormatter(JsonFormatter())
    root.addHandler(sh)

    if log_dir:
        _add_file_handler(root, log_dir, filename)

    # uvicorn installs its own handlers; route them through ours
    for name in ("uvicorn", "uvicorn.error"):
        lg = logging.getLogger(name)
        lg.handlers.clear()
        lg.propagate = True
    logging.getLogger("uvicorn.access").disabled = True

    root._mongo_slow_configured = True  # type: ignore[attr-defined]
    return root


__all__ = ["JsonFormatter", "setup_logging", "EXTRA_FIELDS"]
