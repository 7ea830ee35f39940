"""Configuration models for querycache."""

from querycache.config.models.app_settings import LoggingSettings
from querycache.config.models.cache_settings import CacheSettings
from querycache.config.models.database_settings import DatabaseSettings
from querycache.config.models.query_settings import QuerySettings
from querycache.config.models.settings import Settings

__all__ = [
    "CacheSettings",
    "DatabaseSettings",
    "LoggingSettings",
    "QuerySettings",
    "Settings",
]
