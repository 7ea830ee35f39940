"""Database connection configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field


class DatabaseSettings(BaseModel):
    """Connection settings for the SQLite database collaborator."""

    path: str = Field(default=":memory:", description="Database file path")
    timeout: float = Field(
        default=5.0,
        gt=0,
        description="Seconds to wait for a locked database",
    )


__all__ = ["DatabaseSettings"]
