"""Typed settings loaded once from the environment.

Each group is a slotted dataclass with a ``load()`` classmethod reading
through :class:`EnvConfig`, so hot paths take plain attributes instead of
re-reading ``os.environ``. Command-line overrides are applied afterwards with
``dataclasses.replace``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import quote_plus

from mongo_slow.config.env_config import (
    EnvConfig,
    get_environment,
    get_listen_port,
    get_poll_interval,
    is_debug_mode,
)
from mongo_slow.errors.exceptions import ConfigurationError

DEFAULT_EXCLUDED_NAMESPACES = ('admin.$cmd',)


@dataclass(frozen=True, slots=True)
class TrackerSettings:
    noise_floor_micros: int = 10_000
    observe_floor_micros: int = 500_000
    history_threshold_micros: int = 5_000_000
    history_capacity: int = 1000
    excluded_namespaces: frozenset[str] = field(default_factory=lambda: frozenset(DEFAULT_EXCLUDED_NAMESPACES))

    @classmethod
    def load(cls) -> TrackerSettings:
        return cls(
            noise_floor_micros=EnvConfig.get_int('MONGO_SLOW_NOISE_FLOOR_MICROS', 10_000),
            observe_floor_micros=EnvConfig.get_int('MONGO_SLOW_OBSERVE_FLOOR_MICROS', 500_000),
            history_threshold_micros=EnvConfig.get_int('MONGO_SLOW_HISTORY_THRESHOLD_MICROS', 5_000_000),
            history_capacity=max(1, EnvConfig.get_int('MONGO_SLOW_HISTORY_CAPACITY', 1000)),
            excluded_namespaces=frozenset(
                EnvConfig.get_list('MONGO_SLOW_EXCLUDED_NAMESPACES', list(DEFAULT_EXCLUDED_NAMESPACES))
            ),
        )


@dataclass(frozen=True, slots=True)
class MongoSettings:
    uri: str = ''
    user: str = ''
    password: str = ''
    host: str = ''
    port: int = 27017
    connect_timeout_ms: int = 5000

    @classmethod
    def load(cls) -> MongoSettings:
        return cls(
            uri=EnvConfig.get_str('MONGO_URI', '').strip(),
            user=EnvConfig.get_str('MONGO_USER', ''),
            password=EnvConfig.get_str('MONGO_PASS', ''),
            host=EnvConfig.get_str('MONGO_HOST', '').strip(),
            port=EnvConfig.get_int('MONGO_PORT', 27017),
            connect_timeout_ms=max(1, EnvConfig.get_int('MONGO_SLOW_CONNECT_TIMEOUT_MS', 5000)),
        )

    def validate(self) -> None:
        """Either a URI or a complete user/pass/host triple is required."""
        if self.uri:
            return
        if not (self.user and self.password and self.host):
            raise ConfigurationError("pass in a mongo URI, or a user/pass/host/port combo")

    def connection_uri(self) -> str:
        if self.uri:
            return self.uri
        return "mongodb://%s:%s@%s:%d/?directConnection=true" % (
            quote_plus(self.user), quote_plus(self.password), self.host, self.port,
        )

    def redacted_uri(self) -> str:
        """Connection target safe for logs (no credentials)."""
        if self.uri:
            head, sep, tail = self.uri.rpartition('@')
            if not sep:
                return self.uri
            scheme, _, _ = head.partition('://')
            return f"{scheme}://***@{tail}"
        return f"mongodb://***@{self.host}:{self.port}/?directConnection=true"


@dataclass(frozen=True, slots=True)
class ServerSettings:
    host: str = '0.0.0.0'
    port: int = 8172
    debug: bool = False
    environment: str = 'dev'
    poll_interval: float = 5.0
    health_interval: float = 15.0
    health_timeout: float = 14.0
    log_dir: str = ''
    include_raw: bool = True
    gzip_min_size: int = 1024

    @classmethod
    def load(cls) -> ServerSettings:
        return cls(
            host=EnvConfig.get_str('HOST', '0.0.0.0').strip() or '0.0.0.0',
            port=get_listen_port(),
            debug=is_debug_mode(),
            environment=get_environment(),
            poll_interval=max(0.1, get_poll_interval()),
            health_interval=max(2.0, EnvConfig.get_float('MONGO_SLOW_HEALTH_INTERVAL', 15.0)),
            health_timeout=max(0.1, EnvConfig.get_float('MONGO_SLOW_HEALTH_TIMEOUT', 14.0)),
            log_dir=EnvConfig.get_str('MONGO_SLOW_LOG_DIR', '').strip(),
            include_raw=EnvConfig.get_bool('MONGO_SLOW_JSON_INCLUDE_RAW', True),
            gzip_min_size=max(0, EnvConfig.get_int('MONGO_SLOW_GZIP_MIN_SIZE', 1024)),
        )


@dataclass(frozen=True, slots=True)
class Settings:
    server: ServerSettings
    mongo: MongoSettings
    tracker: TrackerSettings

    @classmethod
    def load(cls) -> Settings:
        return cls(server=ServerSettings.load(), mongo=MongoSettings.load(), tracker=TrackerSettings.load())


__all__ = [
    'DEFAULT_EXCLUDED_NAMESPACES',
    'TrackerSettings',
    'MongoSettings',
    'ServerSettings',
    'Settings',
]
