"""
Configuration for the exporter.

    from mongo_slow.config import Settings, load_environment
    load_environment('prod')
    settings = Settings.load()
"""
from .env_config import EnvConfig
from .environment import load_environment
from .settings import MongoSettings, ServerSettings, Settings, TrackerSettings

__all__ = [
    'EnvConfig',
    'load_environment',
    'Settings',
    'ServerSettings',
    'MongoSettings',
    'TrackerSettings',
]
