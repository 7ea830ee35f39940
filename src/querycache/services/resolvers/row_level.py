"""Per-identifier row caching.

Each identifier maps to its own cache key (``prefix + identifier``). The
resolver bulk-probes all keys, re-queries only the misses by appending an
``IN (...)`` predicate to the caller's query, merges the fetched rows with
the cached ones and writes the fetched rows back in one bulk call.

The caller's query must end where a predicate can follow, e.g.
``SELECT * FROM users WHERE``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from querycache.core.shaping import group_by_key, index_by_key
from querycache.core.statements import append_in_predicate
from querycache.services.resolvers.base import BaseResolver
from querycache.shared.errors import DatabaseError

if TYPE_CHECKING:
    from querycache.core.options import FetchOptions
    from querycache.core.trace import CallTracer
    from querycache.shared.types import Identifier

logger = logging.getLogger(__name__)


def derive_cache_keys(identifiers: Sequence[Identifier], prefix: str) -> dict[Identifier, str]:
    """Map each distinct identifier to ``prefix + identifier``, in input order."""
    keys: dict[Identifier, str] = {}
    for identifier in identifiers:
        if identifier not in keys:
            keys[identifier] = f"{prefix}{identifier}"
    return keys


def partition_hits(
    keys: Mapping[Identifier, str],
    cached: Mapping[str, Any],
) -> tuple[dict[Identifier, Any], list[Identifier]]:
    """Split identifiers into cache hits and identifiers to query.

    A value of None or False counts as a miss.
    """
    found: dict[Identifier, Any] = {}
    to_query: list[Identifier] = []
    for identifier, key in keys.items():
        value = cached.get(key)
        if value is None or value is False:
            to_query.append(identifier)
        else:
            found[identifier] = value
    return found, to_query


def match_fetched(identifiers: Sequence[Identifier], fetched: Mapping[Any, Any]) -> dict[Identifier, Any]:
    """Pair identifiers with fetched entries whose key has the same text.

    Identifiers and column values may differ in type ("7" vs 7).
    """
    by_text = {str(key): value for key, value in fetched.items()}
    return {
        identifier: by_text[str(identifier)]
        for identifier in identifiers
        if str(identifier) in by_text
    }


class RowLevelResolver(BaseResolver):
    """Resolver for the per-identifier caching mode."""

    def resolve(
        self,
        query: str,
        identifiers: Sequence[Identifier],
        options: FetchOptions,
        tracer: CallTracer,
    ) -> Any:
        """Resolve rows for ``identifiers`` from cache and database.

        Returns:
            A list (default), a mapping (grouping or ``arr_index``), or a
            failure ResultEnvelope if the database query failed
        """
        keys = derive_cache_keys(identifiers, options.cache_prefix or "")

        cached: Mapping[str, Any] = {}
        if not options.renew_cache:
            cached = self.cache.get_multi(list(keys.values()), True) or {}

        found, to_query = partition_hits(keys, cached)
        logger.debug(
            "Row cache probe: %d hit(s), %d miss(es) for prefix %s",
            len(found),
            len(to_query),
            options.cache_prefix,
        )

        if not to_query:
            tracer.debug("Cached results found. Skipping query...")
            return self._shape_hits(found, options)

        sql = append_in_predicate(
            query,
            options.key_column_sql(self.identifier_quote),
            len(to_query),
        )
        try:
            rows = self._fetch_all(sql, to_query, tracer)
        except DatabaseError as e:
            return self._failure(e, tracer)

        result, fetched = self._shape_rows(rows, options)
        matched = match_fetched(to_query, fetched)

        if found:
            tracer.debug(f"Loaded from cache: {found!r}")

        if options.grouping:
            # groups are keyed by the caller's identifiers whatever the hit state
            result = {
                identifier: found[identifier] if identifier in found else matched[identifier]
                for identifier in keys
                if identifier in found or identifier in matched
            }
        else:
            result.extend(found.values())
            if options.arr_index:
                result = index_by_key(result, options.arr_index)

        self._write_back(keys, matched, options, tracer)

        return result

    def _shape_hits(self, found: dict[Identifier, Any], options: FetchOptions) -> Any:
        if not options.arr_index:
            return list(found.values())
        return index_by_key(list(found.values()), options.arr_index)

    def _shape_rows(self, rows: list[dict[str, Any]], options: FetchOptions) -> tuple[Any, Mapping[Any, Any]]:
        """Return the fetched rows and the same rows keyed by ``cache_bycol``."""
        if options.grouping:
            grouped = group_by_key(
                rows,
                options.cache_bycol,
                options.projection,
                direct_value=options.cache_bycol_group_value,
            )
            return grouped, dict(grouped)

        indexed = index_by_key(rows, options.cache_bycol)
        if not isinstance(indexed, dict):
            indexed = {}
        return list(rows), indexed

    def _write_back(
        self,
        keys: Mapping[Identifier, str],
        matched: Mapping[Identifier, Any],
        options: FetchOptions,
        tracer: CallTracer,
    ) -> None:
        to_cache = {
            keys[identifier]: value
            for identifier, value in matched.items()
            if value is not None and value is not False
        }

        if not to_cache:
            return

        tracer.debug(f"Saving in cache: {to_cache!r}")
        self.cache.set_multi(to_cache, options.cache_time, True)
