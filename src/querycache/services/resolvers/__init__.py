"""Read-path resolvers, one per cache mode.

- SimpleResolver: single-key get-or-compute and uncached list fetches
- RowLevelResolver: per-identifier row caching with partial-hit re-query
- VersionedListResolver: whole-list caching with optional version stamp
"""

from querycache.services.resolvers.row_level import RowLevelResolver
from querycache.services.resolvers.simple import SimpleResolver
from querycache.services.resolvers.versioned_list import VersionedListResolver

__all__ = ["RowLevelResolver", "SimpleResolver", "VersionedListResolver"]
