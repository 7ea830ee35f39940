"""Per-call diagnostic sink.

A :class:`QueryTrace` is created by the caller and passed into each call
that should be traced. Nothing is buffered on the CachedDatabaseManager
itself, so one manager can serve concurrent requests. A single trace is
not thread-safe and is meant for one request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollectedQuery:
    """One statement sent to the database collaborator."""

    query: str
    params: tuple[Any, ...] | None = None

    def describe(self) -> str:
        if self.params is None:
            return f"Query: {self.query}"
        return f"Query: {self.query} | Bound values: {list(self.params)!r}"


@dataclass
class QueryTrace:
    """Debug messages and collected queries for one request.

    Attributes:
        collect_queries: Record every statement sent to the database
        messages: Debug messages as ``"<operation>: <text>"``
        queries: Collected statements

    Example:
        >>> trace = QueryTrace(collect_queries=True)
        >>> trace.debug("fetch_row", "Cached result found")
        >>> trace.messages
        ['fetch_row: Cached result found']
    """

    collect_queries: bool = False
    messages: list[str] = field(default_factory=list)
    queries: list[CollectedQuery] = field(default_factory=list)

    def debug(self, operation: str, text: str) -> None:
        self.messages.append(f"{operation}: {text}")

    def collect(self, query: str, params: Any = None) -> None:
        if not self.collect_queries:
            return
        self.queries.append(CollectedQuery(query, tuple(params) if params is not None else None))


class CallTracer:
    """Routes debug text for one call to its trace and the module logger.

    Debug text is only produced when the call's ``debug`` option is set;
    query collection depends solely on the trace.
    """

    def __init__(self, operation: str, trace: QueryTrace | None, *, debug: bool) -> None:
        self.operation = operation
        self.trace = trace
        self.enabled = debug

    def debug(self, text: str) -> None:
        if not self.enabled:
            return
        logger.debug("%s: %s", self.operation, text)
        if self.trace is not None:
            self.trace.debug(self.operation, text)

    def query(self, query: str, params: Any = None) -> None:
        if self.enabled:
            self.debug(CollectedQuery(query, tuple(params) if params is not None else None).describe())

    def collect(self, query: str, params: Any = None) -> None:
        if self.trace is not None:
            self.trace.collect(query, params)


__all__ = ["CallTracer", "CollectedQuery", "QueryTrace"]
