"""Persistence for fetched feeds."""

from .kv import FileStore, KeyValueStore, MemoryStore, StorageError
from .ttl_cache import CACHE_META_KEY, CACHE_PREFIX, CacheEntry, CacheMeta, TTLCache, cache_key

__all__ = [
    "FileStore",
    "KeyValueStore",
    "MemoryStore",
    "StorageError",
    "CACHE_META_KEY",
    "CACHE_PREFIX",
    "CacheEntry",
    "CacheMeta",
    "TTLCache",
    "cache_key",
]
