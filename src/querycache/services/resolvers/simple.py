"""Single-key get-or-compute for scalars, single rows and counted lists."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

from querycache.services.resolvers.base import BaseResolver
from querycache.shared.errors import DatabaseError

if TYPE_CHECKING:
    from querycache.core.options import FetchOptions
    from querycache.core.trace import CallTracer

logger = logging.getLogger(__name__)


class SimpleResolver(BaseResolver):
    """Resolver for query shapes addressed by one explicit cache key."""

    def fetch_all(
        self,
        query: str,
        params: Any,
        options: FetchOptions,
        tracer: CallTracer,
    ) -> Any:
        """Uncached list fetch, optionally indexed by ``arr_index``."""
        try:
            rows = self._fetch_all(query, params, tracer)
        except DatabaseError as e:
            return self._failure(e, tracer)
        return self._apply_index(rows, options)

    def fetch_scalar(self, query: str, params: Any, options: FetchOptions, tracer: CallTracer) -> Any:
        return self._get_or_compute(
            lambda: self.database.fetch_scalar(query, params),
            query,
            params,
            options,
            tracer,
            structured=False,
        )

    def fetch_one(self, query: str, params: Any, options: FetchOptions, tracer: CallTracer) -> Any:
        return self._get_or_compute(
            lambda: self.database.fetch_one(query, params),
            query,
            params,
            options,
            tracer,
            structured=True,
        )

    def fetch_counted(self, query: str, params: Any, options: FetchOptions, tracer: CallTracer) -> Any:
        return self._get_or_compute(
            lambda: self.database.fetch_all_with_total_count(query, params),
            query,
            params,
            options,
            tracer,
            structured=True,
        )

    def _get_or_compute(
        self,
        loader: Callable[[], Any],
        query: str,
        params: Any,
        options: FetchOptions,
        tracer: CallTracer,
        *,
        structured: bool,
    ) -> Any:
        """Probe the cache, fall back to the database, then write back.

        Returns:
            The cached or fetched value, or a failure ResultEnvelope
        """
        use_cache = options.uses_single_key_cache
        cache_key = options.cache_key or ""

        if use_cache and not options.renew_cache:
            cached = self.cache.get(cache_key, structured)
            if cached is not None:
                tracer.debug(f'Cached result found via key "{cache_key}". Skipping query...')
                return cached

        tracer.collect(query, params)
        try:
            result = loader()
        except DatabaseError as e:
            return self._failure(e, tracer)

        if use_cache:
            tracer.debug(f'Saving cache via key "{cache_key}". Value: {result!r}')
            self.cache.set(cache_key, result, options.cache_time, structured)

        return result
