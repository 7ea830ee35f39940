"""SQL statement helpers for the mutation path and row-level re-queries.

Column and table names are interpolated into the statement text; only
values are bound. Names must never come from untrusted input.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from querycache.core.options import WriteOptions
from querycache.shared.constants import Query


@dataclass(frozen=True)
class Statement:
    """SQL text with its bound parameters."""

    sql: str
    params: list[Any] = field(default_factory=list)


def quote_identifier(name: str, quote: str = Query.IDENTIFIER_QUOTE) -> str:
    return f"{quote}{name}{quote}"


def placeholders(count: int) -> str:
    return ",".join([Query.PLACEHOLDER] * count)


def append_in_predicate(query: str, column_sql: str, count: int) -> str:
    """Append ``<column_sql> IN (?,...)`` to a query.

    The query must already end where a predicate can follow (typically
    with ``WHERE`` or ``AND``). That precondition is not validated.
    """
    return f"{query} {column_sql} IN ({placeholders(count)})"


def _merge_where_values(values: list[Any], where_vals: list[Any] | Mapping[int, Any]) -> list[Any]:
    """Append a list of values; place mapping values at their positions."""
    if not isinstance(where_vals, Mapping):
        return [*values, *where_vals]

    merged = list(values)
    for position, value in sorted(where_vals.items()):
        if position < len(merged):
            merged[position] = value
        else:
            merged.append(value)
    return merged


def build_set_statement(
    data: Mapping[str, Any],
    table: str,
    index: Any = None,
    options: WriteOptions | None = None,
    quote: str = Query.IDENTIFIER_QUOTE,
) -> Statement:
    """Build the INSERT or UPDATE statement for ``set``.

    Args:
        data: Column to value mapping, in SET order
        table: Destination table
        index: Row identifier; selects ``UPDATE ... WHERE index_key = ?``
        options: Write options (index_key, where, where_vals)
        quote: Identifier quote character

    Returns:
        Statement with the SQL text and bound values

    Example:
        >>> build_set_statement({"name": "a", "age": 5}, "users", 7).params
        ['a', 5, 7]
    """
    options = options or WriteOptions()

    assignments = ", ".join(f"{quote_identifier(column, quote)}=?" for column in data)
    values = list(data.values())
    where = options.where

    if index:
        where = f"WHERE {quote_identifier(options.index_key, quote)}=?"
        values.append(index)
    elif where and options.where_vals:
        values = _merge_where_values(values, options.where_vals)

    verb = "UPDATE" if where else "INSERT"
    sql = f"{verb} {quote_identifier(table, quote)} SET {assignments}"
    if where:
        sql = f"{sql} {where}"

    return Statement(sql=sql, params=values)


__all__ = [
    "Statement",
    "append_in_predicate",
    "build_set_statement",
    "placeholders",
    "quote_identifier",
]
