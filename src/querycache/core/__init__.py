"""Pure building blocks of the cache-aside layer.

Envelopes, array shaping, typed call options, trace sinks and SQL
statement helpers. Nothing here talks to a collaborator.
"""

from querycache.core.envelope import ResultEnvelope, is_failure
from querycache.core.options import CacheMode, FetchOptions, WriteOptions
from querycache.core.shaping import flatten_groups, group_by_key, index_by_key
from querycache.core.statements import Statement, build_set_statement
from querycache.core.trace import CollectedQuery, QueryTrace

__all__ = [
    "CacheMode",
    "CollectedQuery",
    "FetchOptions",
    "QueryTrace",
    "ResultEnvelope",
    "Statement",
    "WriteOptions",
    "build_set_statement",
    "flatten_groups",
    "group_by_key",
    "index_by_key",
    "is_failure",
]
