"""Snapshot sources feeding the tracker."""

from .mongo_source import CURRENT_OP_COMMAND, MongoSnapshotSource, connect_client

__all__ = ["CURRENT_OP_COMMAND", "MongoSnapshotSource", "connect_client"]
