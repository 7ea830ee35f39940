"""Logging constants."""


class Logging:
    """Logging configuration constants."""

    DEFAULT_LEVEL = "INFO"
    DEFAULT_LOGGER_NAME = "querycache"


__all__ = ["Logging"]
