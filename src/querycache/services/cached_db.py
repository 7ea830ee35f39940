"""Cache-aside database facade.

This module provides the public entry point of querycache: a proxy around a
database collaborator that serves reads from a cache store when possible
and normalizes every outcome into data or a ResultEnvelope.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Generator, Mapping, Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Callable

from querycache.core.envelope import ResultEnvelope
from querycache.core.options import CacheMode, FetchOptions, WriteOptions
from querycache.core.shaping import group_by_key, index_by_key
from querycache.core.statements import build_set_statement
from querycache.core.trace import CallTracer, QueryTrace
from querycache.services.resolvers import (
    RowLevelResolver,
    SimpleResolver,
    VersionedListResolver,
)
from querycache.shared.constants import Query
from querycache.shared.errors import DatabaseError
from querycache.shared.logging import (
    log_operation_error,
    log_operation_start,
    log_operation_success,
)

if TYPE_CHECKING:
    from querycache.config.models.settings import Settings
    from querycache.shared.protocols import CacheManager, DatabaseManager
    from querycache.shared.types import Record

logger = logging.getLogger(__name__)


class CachedDatabaseManager:
    """Database proxy with cache-aside reads.

    Reads pick one of three resolution modes from their options:

    - row-level (``cache`` + ``cache_prefix`` + identifier params): one cache
      entry per identifier, misses re-queried with ``IN (...)``
    - versioned list (``cache`` + ``cache_key``): one entry for the whole
      result, optionally bound to a version stamp
    - simple: no caching for lists; single-key caching for
      ``fetch_column``/``fetch_row``/``fetch_array_with_count``

    Database failures come back as failure envelopes. Cache store failures
    are not caught.

    Example:
        >>> db = CachedDatabaseManager(SQLiteDatabaseManager(), SQLiteCacheStore(path))
        >>> db.fetch_array(
        ...     "SELECT * FROM users WHERE",
        ...     [1, 2, 3],
        ...     {"cache": True, "cache_prefix": "user_"},
        ... )
    """

    def __init__(
        self,
        database: DatabaseManager,
        cache: CacheManager,
        *,
        identifier_quote: str = Query.IDENTIFIER_QUOTE,
        index_column: str = Query.DEFAULT_INDEX_COLUMN,
        cache_enabled: bool = True,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the facade.

        Args:
            database: Database collaborator
            cache: Cache store collaborator
            identifier_quote: Quote character for generated identifiers
            index_column: Default for ``cache_bycol`` and ``index_key``
            cache_enabled: When False, every read bypasses the cache
            clock: Time source for list version stamps
        """
        self.database = database
        self.cache = cache
        self.identifier_quote = identifier_quote
        self.index_column = index_column
        self.cache_enabled = cache_enabled

        self._simple = SimpleResolver(database, cache, identifier_quote)
        self._row_level = RowLevelResolver(database, cache, identifier_quote)
        self._versioned = VersionedListResolver(database, cache, identifier_quote, clock)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        database: DatabaseManager,
        cache: CacheManager,
    ) -> CachedDatabaseManager:
        """Build a facade using the query settings section."""
        return cls(
            database,
            cache,
            identifier_quote=settings.query.identifier_quote,
            index_column=settings.query.default_index_column,
            cache_enabled=settings.cache.enabled,
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def query(
        self,
        query: str,
        params: Sequence[Any] | None = None,
        options: WriteOptions | Mapping[str, Any] | None = None,
        trace: QueryTrace | None = None,
    ) -> Any:
        """Execute a statement and report the outcome.

        Args:
            query: SQL statement
            params: Bound values
            options: ``debug`` and ``return`` options
            trace: Optional diagnostic sink

        Returns:
            ResultEnvelope, or one of its fields when ``return`` is set
        """
        opts = self._write_options(options)
        tracer = CallTracer("query", trace, debug=opts.debug)

        envelope = self._execute(query, params, tracer)
        if opts.return_field:
            return envelope.project(opts.return_field)
        return envelope

    def set(
        self,
        data: Mapping[str, Any],
        table: str,
        index: Any = None,
        options: WriteOptions | Mapping[str, Any] | None = None,
        trace: QueryTrace | None = None,
    ) -> Any:
        """Insert or update one row built from a column mapping.

        With ``index`` the statement is ``UPDATE ... WHERE <index_key>=?``;
        otherwise ``where``/``where_vals`` select an UPDATE; otherwise an
        INSERT is issued.

        Returns:
            ResultEnvelope, or one of its fields when ``return`` is set
        """
        opts = self._write_options(options)

        if not data or not table:
            envelope = ResultEnvelope.failure(Query.EMPTY_INPUT_MESSAGE)
            return envelope.project(opts.return_field) if opts.return_field else envelope

        statement = build_set_statement(data, table, index, opts, self.identifier_quote)
        return self.query(
            statement.sql,
            statement.params,
            {"debug": opts.debug, "return": opts.return_field},
            trace,
        )

    def _execute(self, query: str, params: Sequence[Any] | None, tracer: CallTracer) -> ResultEnvelope:
        if not query:
            return ResultEnvelope.failure(Query.EMPTY_QUERY_MESSAGE)

        tracer.query(query, params)
        tracer.collect(query, params)
        log_operation_start(logger, "query", {"statement": query[:80]})

        started = time.perf_counter()
        try:
            status_or_insert_id = self.database.execute(query, list(params) if params is not None else None)
            affected = self.database.affected_row_count()
        except DatabaseError as e:
            tracer.debug(e.message)
            log_operation_error(logger, e, operation="query")
            return ResultEnvelope.from_error(e)

        insert_id = None if isinstance(status_or_insert_id, bool) else status_or_insert_id
        log_operation_success(
            logger,
            operation="query",
            duration_ms=(time.perf_counter() - started) * 1000,
            result_info={"affected": affected},
        )
        return ResultEnvelope.success(affected, insert_id)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def fetch_array(
        self,
        query: str,
        params: Sequence[Any] | None = None,
        options: FetchOptions | Mapping[str, Any] | None = None,
        trace: QueryTrace | None = None,
    ) -> Any:
        """Fetch all rows, using the cache mode selected by ``options``.

        Returns:
            List of rows, a mapping after indexing/grouping, or a failure
            ResultEnvelope
        """
        opts = self._fetch_options(options)
        tracer = CallTracer("fetch_array", trace, debug=opts.debug)

        if not query:
            return ResultEnvelope.failure(Query.EMPTY_QUERY_MESSAGE)

        tracer.query(query, params)
        mode = opts.cache_mode(params)

        if mode is CacheMode.ROW_LEVEL:
            return self._row_level.resolve(query, list(params or []), opts, tracer)
        if mode is CacheMode.VERSIONED_LIST:
            return self._versioned.resolve(query, self._params(params), opts, tracer)
        return self._simple.fetch_all(query, self._params(params), opts, tracer)

    def fetch_array_with_count(
        self,
        query: str,
        params: Sequence[Any] | None = None,
        options: FetchOptions | Mapping[str, Any] | None = None,
        trace: QueryTrace | None = None,
    ) -> Any:
        """Fetch rows together with the total row count.

        Returns:
            ``{"rows": [...], "total_count": n}``, or False on failure
        """
        opts = self._fetch_options(options)
        tracer = CallTracer("fetch_array_with_count", trace, debug=opts.debug)

        if not query:
            return False

        tracer.query(query, params)
        result = self._simple.fetch_counted(query, self._params(params), opts, tracer)
        if isinstance(result, ResultEnvelope):
            return False
        return result

    def fetch_column(
        self,
        query: str,
        params: Sequence[Any] | None = None,
        options: FetchOptions | Mapping[str, Any] | None = None,
        trace: QueryTrace | None = None,
    ) -> Any:
        """Fetch a single scalar value.

        Returns:
            The value, or a failure ResultEnvelope
        """
        opts = self._fetch_options(options)
        tracer = CallTracer("fetch_column", trace, debug=opts.debug)

        if not query:
            return ResultEnvelope.failure(Query.EMPTY_QUERY_MESSAGE)

        tracer.query(query, params)
        return self._simple.fetch_scalar(query, self._params(params), opts, tracer)

    def fetch_row(
        self,
        query: str,
        params: Sequence[Any] | None = None,
        options: FetchOptions | Mapping[str, Any] | None = None,
        trace: QueryTrace | None = None,
    ) -> Any:
        """Fetch a single row.

        Returns:
            The row (None if no row matched), or a failure ResultEnvelope
        """
        opts = self._fetch_options(options)
        tracer = CallTracer("fetch_row", trace, debug=opts.debug)

        if not query:
            return ResultEnvelope.failure(Query.EMPTY_QUERY_MESSAGE)

        tracer.query(query, params)
        return self._simple.fetch_one(query, self._params(params), opts, tracer)

    def _fetch_options(self, options: FetchOptions | Mapping[str, Any] | None) -> FetchOptions:
        overrides = {} if self.cache_enabled else {"cache": False}
        return FetchOptions.coerce(options, {"cache_bycol": self.index_column}, **overrides)

    def _write_options(self, options: WriteOptions | Mapping[str, Any] | None) -> WriteOptions:
        return WriteOptions.coerce(options, {"index_key": self.index_column})

    @staticmethod
    def _params(params: Sequence[Any] | None) -> list[Any] | None:
        return list(params) if params is not None else None

    # ------------------------------------------------------------------
    # Shaping helpers
    # ------------------------------------------------------------------

    @staticmethod
    def index_by_key(rows: Sequence[Record], column: str) -> Any:
        return index_by_key(rows, column)

    @staticmethod
    def group_by_key(
        rows: Sequence[Record],
        column: str,
        projection: Sequence[str] | None = None,
        *,
        direct_value: bool = False,
    ) -> Any:
        return group_by_key(rows, column, projection, direct_value=direct_value)

    # ------------------------------------------------------------------
    # Connection and transactions
    # ------------------------------------------------------------------

    def connect(self, settings: Mapping[str, Any]) -> Any:
        return self.database.connect(settings)

    def start(self) -> None:
        """Begin a transaction."""
        self.database.begin_transaction()

    def rollback(self) -> None:
        """Roll back the current transaction."""
        self.database.rollback()

    def commit(self, trace: QueryTrace | None = None, *, debug: bool = False) -> bool:
        """Commit the current transaction.

        Returns:
            True on success, False if the database reported a failure
        """
        tracer = CallTracer("commit", trace, debug=debug)
        try:
            self.database.commit()
        except DatabaseError as e:
            tracer.debug(e.message)
            log_operation_error(logger, e, operation="commit")
            return False
        return True

    @contextmanager
    def transaction(self) -> Generator[CachedDatabaseManager, None, None]:
        """Context manager for transactions.

        Commits on success, rolls back and re-raises on exception. A failed
        commit raises DatabaseError instead of returning False.

        Example:
            >>> with db.transaction():
            ...     db.set({"name": "a"}, "users")
            ...     db.set({"name": "b"}, "users")
        """
        self.start()
        try:
            yield self
        except Exception:
            self.rollback()
            raise
        self.database.commit()


__all__ = ["CachedDatabaseManager"]
