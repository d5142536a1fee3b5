"""Command-line entry point: ``mongo-slow-queries``.

Loads env files for the selected environment, applies flag overrides on top
of the environment, connects to MongoDB and serves the exporter over HTTP
until interrupted or until the polling loop fails.
"""
from __future__ import annotations

import argparse
import dataclasses
import logging
import sys

import uvicorn

from mongo_slow.collectors.mongo_source import MongoSnapshotSource
from mongo_slow.config.environment import load_environment
from mongo_slow.config.settings import Settings
from mongo_slow.errors import ConfigurationError, SnapshotFetchError
from mongo_slow.service import ExporterService
from mongo_slow.utils.logging_utils import setup_logging
from mongo_slow.version import log_version
from mongo_slow.web.dashboard.app import create_app

logger = logging.getLogger("mongo_slow")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="mongo-slow-queries", description="Export long-running MongoDB operations")
    ap.add_argument("--port", type=int, default=None, help="HTTP listen port (env PORT, default 8172)")
    ap.add_argument("-d", "--debug", action="store_true", default=None, help="enable debug logging")
    ap.add_argument("-e", "--env", default=None, help="environment name used to pick env files (default dev)")
    ap.add_argument("-v", "--version", action="store_true", help="log version information and exit")
    ap.add_argument("--mongo-user", default=None)
    ap.add_argument("--mongo-pass", default=None)
    ap.add_argument("--mongo-host", default=None)
    ap.add_argument("--mongo-port", type=int, default=None)
    ap.add_argument("--mongo-uri", default=None, help="full connection URI, wins over user/pass/host/port")
    ap.add_argument("--interval", type=float, default=None, help="seconds between currentOp polls")
    return ap


def _overrides(args: argparse.Namespace) -> dict[str, object]:
    return {k: v for k, v in vars(args).items() if v is not None}


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return ``settings`` with any flags given on the command line applied."""
    given = _overrides(args)
    server_changes: dict[str, object] = {}
    if "port" in given:
        server_changes["port"] = given["port"]
    if given.get("debug"):
        server_changes["debug"] = True
    if "interval" in given:
        server_changes["poll_interval"] = max(0.1, float(given["interval"]))  # type: ignore[arg-type]

    mongo_changes: dict[str, object] = {}
    for flag, attr in (("mongo_uri", "uri"), ("mongo_user", "user"), ("mongo_pass", "password"),
                       ("mongo_host", "host"), ("mongo_port", "port")):
        if flag in given:
            mongo_changes[attr] = given[flag]

    return dataclasses.replace(
        settings,
        server=dataclasses.replace(settings.server, **server_changes),
        mongo=dataclasses.replace(settings.mongo, **mongo_changes),
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging("DEBUG" if args.debug else "INFO")
    load_environment(args.env)
    settings = apply_overrides(Settings.load(), args)

    setup_logging("DEBUG" if settings.server.debug else "INFO", log_dir=settings.server.log_dir)
    log_version()
    if args.version:
        return 0

    try:
        settings.mongo.validate()
    except ConfigurationError as e:
        logger.error("%s", e)
        return 1

    try:
        source = MongoSnapshotSource.connect(settings.mongo)
    except SnapshotFetchError as e:
        logger.error("%s", e)
        return 1

    server: uvicorn.Server | None = None

    def _on_failure(exc: BaseException) -> None:
        logger.critical("poller terminated, shutting down: %s", exc)
        if server is not None:
            server.should_exit = True

    try:
        service = ExporterService(settings, source, on_failure=_on_failure)
        app = create_app(service)
        config = uvicorn.Config(
            app,
            host=settings.server.host,
            port=settings.server.port,
            log_level="debug" if settings.server.debug else "info",
            log_config=None,
            access_log=False,
        )
        server = uvicorn.Server(config)
        logger.info("listening on %s:%s (environment=%s)",
                    settings.server.host, settings.server.port, settings.server.environment)
        server.run()
    finally:
        source.close()

    if service.poller.failure is not None:
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
