"""Configuration for querycache."""

from querycache.config.loader import (
    SettingsLoader,
    get_config,
    load_settings,
    reload_config,
)
from querycache.config.models import (
    CacheSettings,
    DatabaseSettings,
    LoggingSettings,
    QuerySettings,
    Settings,
)

__all__ = [
    "CacheSettings",
    "DatabaseSettings",
    "LoggingSettings",
    "QuerySettings",
    "Settings",
    "SettingsLoader",
    "get_config",
    "load_settings",
    "reload_config",
]
