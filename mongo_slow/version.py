"""Central version metadata.

Resolution order for each value:
1. Env override (``MONGO_SLOW_VERSION`` / ``MONGO_SLOW_GIT_HASH`` /
   ``MONGO_SLOW_BUILD``), injected by CI or the container build
2. The module constants below

Update ``__version__`` during release tagging.
"""
from __future__ import annotations

import logging

from mongo_slow.config.env_config import EnvConfig

__version__ = "0.1.0"
GIT_HASH = "UNSET"
BUILD = "UNSET"

logger = logging.getLogger(__name__)


def get_version() -> str:
    return EnvConfig.get_str("MONGO_SLOW_VERSION", __version__)


def get_build_info() -> dict[str, str]:
    return {
        "version": get_version(),
        "git_hash": EnvConfig.get_str("MONGO_SLOW_GIT_HASH", GIT_HASH),
        "build": EnvConfig.get_str("MONGO_SLOW_BUILD", BUILD),
    }


def log_version() -> None:
    info = get_build_info()
    logger.info("version variables version=%s git_hash=%s build=%s", info["version"], info["git_hash"], info["build"])


__all__ = ["__version__", "get_version", "get_build_info", "log_version"]
