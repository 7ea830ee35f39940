"""Collaborator protocols consumed by the cache-aside layer."""

from querycache.shared.protocols.collaborators import CacheManager, DatabaseManager

__all__ = ["CacheManager", "DatabaseManager"]
