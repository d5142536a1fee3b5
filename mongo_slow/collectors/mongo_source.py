"""MongoDB ``currentOp`` snapshot source.

Owns the client connection and the wire-level command. Returns the raw
``inprog`` entries untouched; validation is the record parser's job.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from bson.son import SON
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from mongo_slow.config.settings import MongoSettings
from mongo_slow.errors.exceptions import SnapshotFetchError

logger = logging.getLogger(__name__)

CURRENT_OP_COMMAND = SON([("currentOp", 1), ("$all", True)])


def connect_client(settings: MongoSettings) -> MongoClient:
    """Create a client and verify the server answers a ping.

    Raises:
        SnapshotFetchError: the server could not be reached.
    """
    try:
        client: MongoClient = MongoClient(
            settings.connection_uri(),
            serverSelectionTimeoutMS=settings.connect_timeout_ms,
            connectTimeoutMS=settings.connect_timeout_ms,
        )
    except PyMongoError as e:
        logger.error("invalid mongo connection settings for %s: %s", settings.redacted_uri(), e)
        raise SnapshotFetchError(f"failed to connect to mongo: {e}") from e
    try:
        client.admin.command("ping")
    except PyMongoError as e:
        logger.error("failed to ping mongo at %s: %s", settings.redacted_uri(), e)
        client.close()
        raise SnapshotFetchError(f"failed to connect to mongo: {e}") from e
    logger.info("connected to mongo at %s", settings.redacted_uri())
    return client


class MongoSnapshotSource:
    def __init__(self, client: MongoClient) -> None:
        self.client = client

    @classmethod
    def connect(cls, settings: MongoSettings) -> MongoSnapshotSource:
        return cls(connect_client(settings))

    def fetch(self) -> list[Mapping[str, Any]]:
        try:
            result = self.client.admin.command(CURRENT_OP_COMMAND)
        except PyMongoError as e:
            raise SnapshotFetchError(f"currentOp failed: {e}") from e
        inprog = result.get("inprog") if isinstance(result, Mapping) else None
        if not isinstance(inprog, list):
            raise SnapshotFetchError(f"currentOp returned no inprog list (got {type(inprog).__name__})")
        return inprog

    def ping(self) -> dict[str, Any]:
        try:
            reply = self.client.admin.command("ping")
        except PyMongoError as e:
            raise SnapshotFetchError(f"ping failed: {e}") from e
        return {"ok": reply.get("ok")}

    def close(self) -> None:
        self.client.close()


__all__ = ["CURRENT_OP_COMMAND", "MongoSnapshotSource", "connect_client"]
