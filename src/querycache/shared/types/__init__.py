"""
Type aliases shared across querycache.

Records are plain dicts as returned by the database collaborator; result
sets are lists before shaping and dicts after indexing or grouping.
"""

from __future__ import annotations

from typing import Any, Dict, List, Union

Identifier = Union[str, int]
Record = Dict[str, Any]
Rows = List[Record]
IndexedRows = Dict[Any, Record]
GroupedRows = Dict[Any, List[Any]]
BoundParams = List[Any]

__all__ = [
    "BoundParams",
    "GroupedRows",
    "Identifier",
    "IndexedRows",
    "Record",
    "Rows",
]
