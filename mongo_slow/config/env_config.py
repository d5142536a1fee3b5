"""Centralized environment variable access with validation and type coercion.

Single source of truth for environment reads in the exporter. Values are
parsed once and cached; invalid values fall back to the default with a
warning instead of failing start-up.

Usage:
    from mongo_slow.config.env_config import EnvConfig

    interval = EnvConfig.get_float('MONGO_SLOW_POLL_INTERVAL', 5.0)
    debug = EnvConfig.get_bool('DEBUG', False)
    excluded = EnvConfig.get_list('MONGO_SLOW_EXCLUDED_NAMESPACES', ['admin.$cmd'])
"""
from __future__ import annotations

import logging
import os
from typing import Any

logger = logging.getLogger(__name__)


class EnvConfig:
    """Centralized environment variable access with validation."""

    # Cache for parsed values to avoid repeated parsing
    _cache: dict[str, Any] = {}

    @classmethod
    def clear_cache(cls) -> None:
        """Clear the cache (needed after loading env files and in tests)."""
        cls._cache.clear()

    @classmethod
    def get_int(cls, key: str, default: int) -> int:
        """Integer value of ``key``; unset, blank or unparseable gives ``default``."""
        cache_key = f"{key}:int:{default}"
        if cache_key in cls._cache:
            return cls._cache[cache_key]

        value_str = os.environ.get(key, '')
        if not value_str.strip():
            cls._cache[cache_key] = default
            return default
        try:
            result = int(value_str)
        except (ValueError, TypeError) as e:
            logger.warning(
                "Invalid integer value for %s='%s', using default=%s. Error: %s", key, value_str, default, e
            )
            result = default
        cls._cache[cache_key] = result
        return result

    @classmethod
    def get_bool(cls, key: str, default: bool = False) -> bool:
        """Get boolean environment variable with consistent parsing.

        Truthy values: '1', 'true', 'yes', 'on' (case-insensitive).
        Anything else that is non-empty is False.
        """
        cache_key = f"{key}:bool:{default}"
        if cache_key in cls._cache:
            return cls._cache[cache_key]

        value_str = os.environ.get(key, '')
        if not value_str:
            cls._cache[cache_key] = default
            return default

        result = value_str.strip().lower() in ('1', 'true', 'yes', 'on')
        cls._cache[cache_key] = result
        return result

    @classmethod
    def get_str(cls, key: str, default: str = '') -> str:
        """Get string environment variable."""
        cache_key = f"{key}:str:{default}"
        if cache_key in cls._cache:
            return cls._cache[cache_key]

        result = os.environ.get(key, default)
        cls._cache[cache_key] = result
        return result

    @classmethod
    def get_float(cls, key: str, default: float) -> float:
        """Float counterpart of :meth:`get_int`."""
        cache_key = f"{key}:float:{default}"
        if cache_key in cls._cache:
            return cls._cache[cache_key]

        value_str = os.environ.get(key, '')
        if not value_str.strip():
            cls._cache[cache_key] = default
            return default
        try:
            result = float(value_str)
        except (ValueError, TypeError) as e:
            logger.warning(
                "Invalid float value for %s='%s', using default=%s. Error: %s", key, value_str, default, e
            )
            result = default
        cls._cache[cache_key] = result
        return result

    @classmethod
    def get_list(cls, key: str, default: list[str] | None = None, separator: str = ',') -> list[str]:
        """Get list of strings from environment variable (comma-separated by default).

        Blank items are dropped and whitespace is stripped. An unset or blank
        variable yields a copy of ``default``.
        """
        if default is None:
            default = []

        cache_key = f"{key}:list:{separator}:{','.join(default)}"
        if cache_key in cls._cache:
            return list(cls._cache[cache_key])

        value_str = os.environ.get(key, '')
        if not value_str.strip():
            result = list(default)
        else:
            result = [item.strip() for item in value_str.split(separator) if item.strip()]
        cls._cache[cache_key] = result
        return list(result)


def get_poll_interval() -> float:
    """Get poll interval in seconds (default: 5.0)."""
    return EnvConfig.get_float('MONGO_SLOW_POLL_INTERVAL', 5.0)


def get_listen_port() -> int:
    """Get HTTP listen port (default: 8172)."""
    return EnvConfig.get_int('PORT', 8172)


def is_debug_mode() -> bool:
    """Check if debug logging is enabled (default: False)."""
    return EnvConfig.get_bool('DEBUG', False)


def get_environment() -> str:
    """Get the deployment environment name (default: dev)."""
    return EnvConfig.get_str('ENVIRONMENT', 'dev').strip() or 'dev'


__all__ = [
    'EnvConfig',
    'get_poll_interval',
    'get_listen_port',
    'is_debug_mode',
    'get_environment',
]
