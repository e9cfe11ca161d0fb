from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..models import Article, Source
from ..processors.normalize import normalize_items
from ..storage import TTLCache
from ..utils.logging import get_logger
from .base import Transport, TransportError

logger = get_logger("rssbrief.fetchers.source")

MIN_FETCH_COUNT = 15


def fetch_count(max_per_source: int) -> int:
    """How many items to ask a transport for."""
    return max(max_per_source * 3, MIN_FETCH_COUNT)


@dataclass(frozen=True, slots=True)
class FetchOutcome:
    articles: Tuple[Article, ...] = field(default_factory=tuple)
    from_cache: bool = False
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SourceFetcher:
    """Fetch one source: cache first, then the primary transport, then the fallback.

    Only the fallback's failure is reported; the primary's is logged.
    """

    def __init__(
        self,
        cache: TTLCache,
        primary: Transport,
        secondary: Transport,
        *,
        limit: int = MIN_FETCH_COUNT,
    ) -> None:
        self.cache = cache
        self.primary = primary
        self.secondary = secondary
        self.limit = limit

    def _live(self, transport: Transport, source: Source, now: Optional[float]) -> List[Article]:
        items = transport.fetch(source.url, limit=self.limit)
        articles = normalize_items(items, source)
        self.cache.put(source.url, articles, now=now)
        logger.info("Fetched %d items from %s via %s", len(articles), source.name, transport.name)
        return articles

    def fetch(self, source: Source, *, now: Optional[float] = None) -> FetchOutcome:
        cached = self.cache.get(source.url, now=now)
        if cached is not None:
            logger.debug("Cache hit for %s (%d items)", source.name, len(cached.articles))
            return FetchOutcome(articles=cached.articles, from_cache=True)

        try:
            return FetchOutcome(articles=tuple(self._live(self.primary, source, now)))
        except TransportError as exc:
            logger.warning("%s failed for %r: %s", self.primary.name, source.name, exc)

        try:
            return FetchOutcome(articles=tuple(self._live(self.secondary, source, now)))
        except TransportError as exc:
            logger.error("Both transports failed for %r: %s", source.name, exc)
            return FetchOutcome(error=str(exc) or type(exc).__name__)
