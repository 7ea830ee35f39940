"""Typed per-call options.

Options arrive either as a plain mapping using the historical keys
(``cache``, ``cache_key``, ``return`` ...) or as model instances. Invalid
combinations are rejected up front with a ConfigurationError instead of one
option silently winning over another.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from querycache.shared.constants import Query
from querycache.shared.errors import create_config_error


class CacheMode(str, Enum):
    """Read-path resolution strategy, chosen once per call."""

    ROW_LEVEL = "row_level"
    VERSIONED_LIST = "versioned_list"
    SIMPLE = "simple"


class _CallOptions(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        populate_by_name=True,
        frozen=True,
    )

    debug: bool = Field(default=False, description="Capture a trace of this call")
    return_field: str | None = Field(
        default=None,
        alias="return",
        description="Project the result envelope to a single named field",
    )

    @classmethod
    def coerce(
        cls,
        value: Any = None,
        defaults: Mapping[str, Any] | None = None,
        **overrides: Any,
    ) -> Any:
        """Build options from None, a mapping or an existing instance.

        Args:
            value: Caller-supplied options
            defaults: Values used for keys the caller left unset
            **overrides: Values that replace the caller's

        Raises:
            ConfigurationError: If the options are invalid
        """
        if isinstance(value, cls) and not overrides and not defaults:
            return value

        if value is None:
            data: dict[str, Any] = {}
        elif isinstance(value, cls):
            data = value.model_dump(exclude_unset=True)
        elif isinstance(value, Mapping):
            data = dict(value)
        else:
            msg = f"options must be a mapping or {cls.__name__}, got {type(value).__name__}"
            raise create_config_error(msg, operation="coerce_options")

        for key, default in (defaults or {}).items():
            field = cls.model_fields.get(key)
            if key not in data and not (field and field.alias in data):
                data[key] = default
        data.update(overrides)
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise create_config_error(
                f"Invalid {cls.__name__}: {e}",
                operation="coerce_options",
                original_error=e,
                error_count=e.error_count(),
            ) from e


class FetchOptions(_CallOptions):
    """Options for read operations.

    Attributes:
        cache: Enable cache-aside for this call
        cache_key: Explicit single cache key (list, scalar and row modes)
        cache_prefix: Prefix for per-identifier keys; enables row-level mode
        cache_bycol: Row-identifying column
        cache_bycol_sql: Raw SQL column reference for the ``IN (...)`` predicate
        cache_bycol_group: Group instead of index; True keeps full rows,
            a list of column names projects each row
        cache_bycol_group_value: Store the projected column value directly
        cache_time: TTL override in seconds; None uses the store default
        cache_version_key: Key holding the list version stamp
        renew_cache: Skip the cache probe and refresh the entry
        arr_index: Re-index the final result by this column
    """

    cache: bool = False
    cache_key: str | None = None
    cache_prefix: str | None = None
    cache_bycol: str = Query.DEFAULT_INDEX_COLUMN
    cache_bycol_sql: str | None = None
    cache_bycol_group: Union[bool, list[str]] = False
    cache_bycol_group_value: bool = False
    cache_time: int | None = Field(default=None, ge=0)
    cache_version_key: str | None = None
    renew_cache: bool = False
    arr_index: str | None = None

    @model_validator(mode="after")
    def _check_combinations(self) -> FetchOptions:
        if self.arr_index and self.grouping:
            msg = "arr_index cannot be combined with cache_bycol_group"
            raise ValueError(msg)
        if self.cache_bycol_group_value and not self.projection:
            msg = "cache_bycol_group_value requires a cache_bycol_group column list"
            raise ValueError(msg)
        return self

    @property
    def grouping(self) -> bool:
        if isinstance(self.cache_bycol_group, list):
            return bool(self.cache_bycol_group)
        return self.cache_bycol_group

    @property
    def projection(self) -> list[str]:
        if isinstance(self.cache_bycol_group, list):
            return list(self.cache_bycol_group)
        return []

    def key_column_sql(self, quote: str = Query.IDENTIFIER_QUOTE) -> str:
        """Column reference used in the generated ``IN (...)`` predicate."""
        if self.cache_bycol_sql:
            return self.cache_bycol_sql
        return f"{quote}{self.cache_bycol}{quote}"

    @property
    def uses_single_key_cache(self) -> bool:
        return self.cache and bool(self.cache_key)

    def cache_mode(self, params: Sequence[Any] | None) -> CacheMode:
        """Select the read-path resolver for this call."""
        if self.cache and self.cache_prefix and params:
            return CacheMode.ROW_LEVEL
        if self.uses_single_key_cache:
            return CacheMode.VERSIONED_LIST
        return CacheMode.SIMPLE


class WriteOptions(_CallOptions):
    """Options for ``set`` mutations.

    Attributes:
        index_key: Column used by ``WHERE <index_key> = ?``
        where: Manual predicate, used when no index value is given
        where_vals: Values for ``where``. A list is always appended after
            the SET values; its indexes are not parameter positions, so it
            never overwrites a SET value. A ``{position: value}`` mapping
            places each value at that parameter position, overwriting the
            value there or appending past the end.
    """

    index_key: str = Query.DEFAULT_INDEX_COLUMN
    where: str = ""
    where_vals: Union[list[Any], dict[int, Any]] = Field(default_factory=list)


__all__ = ["CacheMode", "FetchOptions", "WriteOptions"]
