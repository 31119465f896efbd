"""Response cache stores."""

from .cache import ResponseCache
from .sqlite_store import SqliteCacheStore
from .store import CacheEntry, CacheStore, InMemoryCacheStore

__all__ = [
    "CacheEntry",
    "CacheStore",
    "InMemoryCacheStore",
    "ResponseCache",
    "SqliteCacheStore",
]
