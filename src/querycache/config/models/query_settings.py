"""Query building configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from querycache.shared.constants import Query


class QuerySettings(BaseModel):
    """Defaults for generated SQL."""

    default_index_column: str = Field(
        default=Query.DEFAULT_INDEX_COLUMN,
        description="Column used for row identifiers and UPDATE predicates",
    )
    identifier_quote: str = Field(
        default=Query.IDENTIFIER_QUOTE,
        description="Quote character for interpolated column and table names",
    )

    @field_validator("identifier_quote")
    @classmethod
    def _single_quote_char(cls, value: str) -> str:
        if value not in ("`", '"'):
            msg = f"identifier_quote must be ` or \", got {value!r}"
            raise ValueError(msg)
        return value


__all__ = ["QuerySettings"]
