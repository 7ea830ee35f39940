"""SQLite dialect adjustments.

The mutation builder emits MySQL's ``INSERT `t` SET `a`=?, `b`=?`` form,
which SQLite does not accept; it is rewritten to a column-list INSERT.
Only ``column=?`` assignments are supported by the rewrite.
"""

from __future__ import annotations

import re

_INSERT_SET_RE = re.compile(
    r"^\s*INSERT\s+(?:INTO\s+)?(?P<table>\S+)\s+SET\s+(?P<assignments>.+?)\s*;?\s*$",
    re.IGNORECASE | re.DOTALL,
)
_TRAILING_LIMIT_RE = re.compile(
    r"\s+LIMIT\s+\d+(?:\s*(?:,|OFFSET)\s*\d+)?\s*;?\s*$",
    re.IGNORECASE,
)


def is_insert(statement: str) -> bool:
    return statement.lstrip()[:6].upper() == "INSERT"


def rewrite_insert_set(statement: str) -> str:
    """Rewrite ``INSERT t SET a=?, b=?`` into ``INSERT INTO t (a, b) VALUES (?, ?)``.

    Statements of any other shape are returned unchanged.
    """
    match = _INSERT_SET_RE.match(statement)
    if match is None:
        return statement

    columns: list[str] = []
    values: list[str] = []
    for assignment in match.group("assignments").split(","):
        column, _, value = assignment.partition("=")
        columns.append(column.strip())
        values.append(value.strip())

    return (
        f"INSERT INTO {match.group('table')} ({', '.join(columns)}) "
        f"VALUES ({', '.join(values)})"
    )


def count_statement(statement: str) -> str:
    """Build a COUNT(*) over ``statement`` without its trailing LIMIT/OFFSET.

    Only literal LIMIT/OFFSET values are stripped; bound placeholders in
    the LIMIT clause are not supported.
    """
    base = _TRAILING_LIMIT_RE.sub("", statement.rstrip().rstrip(";"))
    return f"SELECT COUNT(*) FROM ({base}) AS counted"


__all__ = ["count_statement", "is_insert", "rewrite_insert_set"]
