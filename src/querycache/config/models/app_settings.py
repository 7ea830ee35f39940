"""Logging configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from querycache.shared.constants import Logging

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LoggingSettings(BaseModel):
    """Logging configuration.

    This class manages logging level, optional JSON log file and console
    rendering.
    """

    level: str = Field(default=Logging.DEFAULT_LEVEL, description="Logging level")
    file: str | None = Field(default=None, description="JSON log file path")
    use_rich_console: bool = Field(default=True, description="Render console logs with Rich")

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LEVELS:
            msg = f"level must be one of {', '.join(_LEVELS)}"
            raise ValueError(msg)
        return level


__all__ = ["LoggingSettings"]
