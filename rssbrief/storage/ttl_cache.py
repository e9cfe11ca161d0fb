from __future__ import annotations

import hashlib
import json
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from ..models import Article
from ..utils.logging import get_logger
from .kv import KeyValueStore, StorageError

logger = get_logger("rssbrief.storage.cache")

CACHE_PREFIX = "RSSBrief_feed_"
CACHE_META_KEY = "RSSBrief_meta"


def cache_key(source_url: str) -> str:
    digest = hashlib.sha256(source_url.encode("utf-8")).hexdigest()
    return CACHE_PREFIX + digest[:40]


@dataclass(frozen=True, slots=True)
class CacheEntry:
    saved_at: float
    articles: Tuple[Article, ...]


@dataclass(frozen=True, slots=True)
class CacheMeta:
    saved_at: float
    feed_count: int


class TTLCache:
    """Per-source article cache whose entries expire after ``ttl_seconds``.

    ``now`` arguments are epoch seconds; when omitted the injected ``clock``
    is read. Expired entries stay in the store until overwritten but read
    as absent.
    """

    def __init__(
        self,
        store: KeyValueStore,
        ttl_seconds: float,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds must be non-negative")
        self.store = store
        self.ttl_seconds = ttl_seconds
        self.clock = clock

    def _load(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            raw = self.store.get(key)
            if raw is None:
                return None
            data = json.loads(raw.decode("utf-8"))
        except (StorageError, ValueError) as exc:
            logger.debug("Ignoring unreadable cache record %s: %s", key, exc)
            return None
        return data if isinstance(data, dict) else None

    def get(self, source_url: str, *, now: Optional[float] = None) -> Optional[CacheEntry]:
        data = self._load(cache_key(source_url))
        if data is None:
            return None
        try:
            saved_at = float(data["saved_at"])
            articles = tuple(Article.from_dict(a) for a in data.get("articles") or [])
        except (KeyError, TypeError, ValueError) as exc:
            logger.debug("Ignoring malformed cache entry for %s: %s", source_url, exc)
            return None
        now = self.clock() if now is None else now
        if now - saved_at > self.ttl_seconds:
            return None
        return CacheEntry(saved_at=saved_at, articles=articles)

    def put(self, source_url: str, articles: Sequence[Article], *, now: Optional[float] = None) -> bool:
        """Store ``articles`` for ``source_url``; return False if the write failed."""
        now = self.clock() if now is None else now
        payload = {"saved_at": now, "articles": [a.to_dict() for a in articles]}
        try:
            self.store.set(cache_key(source_url), json.dumps(payload).encode("utf-8"))
        except (StorageError, OSError) as exc:
            logger.warning("Cache write failed for %s: %s", source_url, exc)
            return False
        return True

    def invalidate(self, source_url: str) -> None:
        try:
            self.store.remove(cache_key(source_url))
        except (StorageError, OSError) as exc:
            logger.warning("Cache invalidation failed for %s: %s", source_url, exc)

    def write_meta(self, feed_count: int, *, now: Optional[float] = None) -> None:
        now = self.clock() if now is None else now
        payload = {"feed_count": feed_count, "saved_at": now}
        try:
            self.store.set(CACHE_META_KEY, json.dumps(payload).encode("utf-8"))
        except (StorageError, OSError) as exc:
            logger.debug("Meta write failed: %s", exc)

    def read_meta(self) -> Optional[CacheMeta]:
        data = self._load(CACHE_META_KEY)
        if data is None:
            return None
        try:
            return CacheMeta(saved_at=float(data["saved_at"]), feed_count=int(data["feed_count"]))
        except (KeyError, TypeError, ValueError):
            return None

