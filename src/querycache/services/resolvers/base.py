"""Base resolver with shared collaborator access.

Resolvers catch DatabaseError and turn it into a failure envelope. Cache
store calls are deliberately left unguarded so a cache fault reaches the
caller.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from querycache.core.envelope import ResultEnvelope
from querycache.core.shaping import index_by_key
from querycache.shared.constants import Query
from querycache.shared.logging import log_operation_error

if TYPE_CHECKING:
    from querycache.core.options import FetchOptions
    from querycache.core.trace import CallTracer
    from querycache.shared.errors import DatabaseError
    from querycache.shared.protocols import CacheManager, DatabaseManager

logger = logging.getLogger(__name__)


class BaseResolver:
    """Base class for read-path resolvers."""

    def __init__(
        self,
        database: DatabaseManager,
        cache: CacheManager,
        identifier_quote: str = Query.IDENTIFIER_QUOTE,
    ) -> None:
        """Initialize resolver.

        Args:
            database: Database collaborator
            cache: Cache store collaborator
            identifier_quote: Quote character for generated column references
        """
        self.database = database
        self.cache = cache
        self.identifier_quote = identifier_quote

    def _fetch_all(self, query: str, params: Any, tracer: CallTracer) -> list[dict[str, Any]]:
        tracer.collect(query, params)
        rows = self.database.fetch_all(query, params)
        return list(rows or [])

    def _failure(self, error: DatabaseError, tracer: CallTracer) -> ResultEnvelope:
        tracer.debug(error.message)
        log_operation_error(logger, error, operation=tracer.operation)
        return ResultEnvelope.from_error(error)

    @staticmethod
    def _apply_index(result: Any, options: FetchOptions) -> Any:
        if options.arr_index:
            return index_by_key(result, options.arr_index)
        return result
