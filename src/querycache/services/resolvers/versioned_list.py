"""Whole-result caching under one key, optionally version-stamped.

With ``cache_version_key`` set, the effective key is
``<cache_key>_<version>`` where the version is read from the cache under the
version key and minted from the clock when absent. Dropping or expiring the
version key makes every list cached under the old version unreachable
without deleting it.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any, Callable

from querycache.services.resolvers.base import BaseResolver
from querycache.shared.constants import Cache, Query
from querycache.shared.errors import DatabaseError

if TYPE_CHECKING:
    from querycache.core.options import FetchOptions
    from querycache.core.trace import CallTracer
    from querycache.shared.protocols import CacheManager, DatabaseManager

logger = logging.getLogger(__name__)


class VersionedListResolver(BaseResolver):
    """Resolver for the whole-list caching mode."""

    def __init__(
        self,
        database: DatabaseManager,
        cache: CacheManager,
        identifier_quote: str = Query.IDENTIFIER_QUOTE,
        clock: Callable[[], float] = time.time,
    ) -> None:
        super().__init__(database, cache, identifier_quote)
        self.clock = clock

    def effective_key(self, options: FetchOptions) -> str:
        """Return the cache key for this call, minting a version if needed."""
        cache_key = options.cache_key or ""
        if not options.cache_version_key:
            return cache_key

        version = self.cache.get(options.cache_version_key)
        if not version:
            version = int(self.clock())
            self.cache.set(options.cache_version_key, version, options.cache_time)
            logger.debug(
                "Minted list version %s under %s",
                version,
                options.cache_version_key,
            )

        return f"{cache_key}{Cache.VERSION_SEPARATOR}{version}"

    def resolve(
        self,
        query: str,
        params: Any,
        options: FetchOptions,
        tracer: CallTracer,
    ) -> Any:
        """Serve the list from cache or fetch and cache it.

        The cached value is always the raw row list; ``arr_index`` only
        shapes the value returned to the caller.
        """
        cache_key = self.effective_key(options)

        if not options.renew_cache:
            cached = self.cache.get(cache_key, True)
            if cached is not None:
                tracer.debug(f'Cached result found via key "{cache_key}". Skipping query...')
                return self._apply_index(cached, options)

        try:
            rows = self._fetch_all(query, params, tracer)
        except DatabaseError as e:
            return self._failure(e, tracer)

        tracer.debug(f'Saving cache via key "{cache_key}". Value: {rows!r}')
        self.cache.set(cache_key, rows, options.cache_time, True)

        return self._apply_index(rows, options)
