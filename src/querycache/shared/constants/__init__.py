"""Shared constants for querycache."""

from querycache.shared.constants.cache import (
    BASE_DAY,
    BASE_HOUR,
    BASE_MINUTE,
    Cache,
    CacheValidationConstants,
)
from querycache.shared.constants.logging import Logging
from querycache.shared.constants.query import EnvelopeFields, Query

__all__ = [
    "BASE_DAY",
    "BASE_HOUR",
    "BASE_MINUTE",
    "Cache",
    "CacheValidationConstants",
    "EnvelopeFields",
    "Logging",
    "Query",
]
