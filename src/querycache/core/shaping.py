"""Array shaping: index and group result rows by a column value.

Both functions are pure and are applied to fresh database rows as well as
to rows restored from the cache.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from querycache.shared.types import GroupedRows, IndexedRows, Record


def _iter_rows(rows: Sequence[Record] | Mapping[Any, Record]) -> Iterable[Record]:
    if isinstance(rows, Mapping):
        return rows.values()
    return rows


def index_by_key(
    rows: Sequence[Record] | Mapping[Any, Record],
    column: str,
) -> IndexedRows | Sequence[Record] | Mapping[Any, Record]:
    """Index rows by the value of ``column``.

    Later rows with a duplicate value overwrite earlier ones. If any row
    lacks the column (or holds None in it) the input is returned unchanged.

    Args:
        rows: Rows as a list, or a mapping whose values are rows
        column: Column whose value becomes the key

    Returns:
        Mapping of column value to row, or ``rows`` itself on fallback

    Example:
        >>> index_by_key([{"id": 1}, {"id": 2}], "id")
        {1: {'id': 1}, 2: {'id': 2}}
    """
    result: IndexedRows = {}

    for row in _iter_rows(rows):
        if not isinstance(row, Mapping) or row.get(column) is None:
            return rows
        result[row[column]] = row

    return result


def group_by_key(
    rows: Sequence[Record] | Mapping[Any, Record],
    column: str,
    projection: Sequence[str] | None = None,
    *,
    direct_value: bool = False,
) -> GroupedRows:
    """Group rows by the value of ``column``.

    Processing stops at the first row lacking the group column; rows grouped
    before it are kept. Order within each group follows input order.

    Args:
        rows: Input rows
        column: Column to group by
        projection: Columns to keep per row; empty or None keeps full rows
        direct_value: Store the first present projected column's value
            instead of a reduced row. Meaningful with one projection column.

    Returns:
        Mapping of column value to list of rows (or values)

    Example:
        >>> rows = [
        ...     {"id": 100, "catalog_id": 1},
        ...     {"id": 101, "catalog_id": 1},
        ...     {"id": 103, "catalog_id": 2},
        ... ]
        >>> group_by_key(rows, "catalog_id", ["id"], direct_value=True)
        {1: [100, 101], 2: [103]}
    """
    result: GroupedRows = {}

    if not rows:
        return result

    save_full_row = not projection

    for row in _iter_rows(rows):
        if not isinstance(row, Mapping) or row.get(column) is None:
            break

        if save_full_row:
            item: Any = row
        elif direct_value:
            item = {}
            for col in projection or ():
                if row.get(col) is not None:
                    item = row[col]
                    break
        else:
            item = {col: row[col] for col in projection or () if row.get(col) is not None}

        result.setdefault(row[column], []).append(item)

    return result


def flatten_groups(groups: Mapping[Any, Sequence[Any]]) -> list[Any]:
    """Concatenate the groups of :func:`group_by_key` back into one list."""
    return [item for group in groups.values() for item in group]


__all__ = ["flatten_groups", "group_by_key", "index_by_key"]
