from __future__ import annotations

import threading
import time
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from .fetchers import FeedTransport, FetchOutcome, Rss2JsonTransport, SourceFetcher, fetch_count
from .models import AggregateState, Article, FeedStatus, Source
from .processors import Deduplicator
from .storage import FileStore, KeyValueStore, TTLCache
from .utils.logging import get_logger
from .utils.pipeline_config import BriefSettings

logger = get_logger("rssbrief.orchestrator")

ProgressCallback = Callable[[int, int], None]


class NoSourcesConfigured(Exception):
    """Raised when a load cycle is requested with an empty source list."""


def sort_by_recency(articles: Iterable[Article]) -> List[Article]:
    """Newest first; undated articles last; ties keep their input order."""
    return sorted(articles, key=lambda a: a.sort_timestamp, reverse=True)


def cap_per_source(articles: Iterable[Article], max_per_source: int) -> List[Article]:
    """Keep at most ``max_per_source`` articles per source, in input order."""
    counts: Dict[str, int] = defaultdict(int)
    kept: List[Article] = []
    for art in articles:
        if counts[art.source_name] >= max_per_source:
            continue
        counts[art.source_name] += 1
        kept.append(art)
    return kept


def build_state(
    sources: Sequence[Source],
    outcomes: Sequence[FetchOutcome],
    settings: BriefSettings,
    *,
    loaded_at: Optional[datetime] = None,
) -> AggregateState:
    """Reduce per-source outcomes (aligned with ``sources``) to an ``AggregateState``."""
    statuses: List[FeedStatus] = []
    raw_by_source: Dict[str, tuple] = {}
    merged: List[Article] = []

    for source, outcome in zip(sources, outcomes):
        statuses.append(
            FeedStatus(
                name=source.name,
                category=source.display_category,
                ok=outcome.ok,
                count=len(outcome.articles),
                error=outcome.error,
                from_cache=outcome.from_cache,
            )
        )
        raw_by_source[source.name] = tuple(sort_by_recency(outcome.articles)[: settings.raw_view_limit])
        if outcome.ok:
            merged.extend(outcome.articles)

    limited = cap_per_source(sort_by_recency(merged), settings.max_per_source)
    unique = Deduplicator(threshold=settings.dedup_threshold).dedupe(limited)
    ranked = tuple(unique[: settings.total_articles])

    logger.debug(
        "Ranked %d articles (merged=%d, capped=%d, unique=%d)",
        len(ranked),
        len(merged),
        len(limited),
        len(unique),
    )
    return AggregateState(
        ranked_articles=ranked,
        raw_by_source=MappingProxyType(raw_by_source),
        statuses=tuple(statuses),
        loaded_at=loaded_at,
    )


class Aggregator:
    """Run load cycles over all sources and hold the latest ``AggregateState``.

    Only one cycle runs at a time; ``load_all`` called while a cycle is in
    flight returns ``None`` without doing anything.
    """

    def __init__(
        self,
        fetcher: SourceFetcher,
        settings: BriefSettings,
        *,
        max_workers: int = 16,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.fetcher = fetcher
        self.settings = settings
        self.max_workers = max_workers
        self.clock = clock
        self._state = AggregateState()
        self._in_flight = threading.Lock()

    @property
    def state(self) -> AggregateState:
        return self._state

    @property
    def loading(self) -> bool:
        return self._in_flight.locked()

    def _fetch_one(self, source: Source, now: float) -> FetchOutcome:
        try:
            return self.fetcher.fetch(source, now=now)
        except Exception as exc:  # noqa: BLE001 - one source must not abort the cycle
            logger.exception("Unexpected error fetching %s: %s", source.name, exc)
            return FetchOutcome(error=f"{type(exc).__name__}: {exc}")

    def fetch_all(
        self,
        sources: Sequence[Source],
        *,
        now: float,
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[FetchOutcome]:
        """Fetch every source concurrently; outcomes are returned in source order."""
        outcomes: Dict[int, FetchOutcome] = {}
        max_workers = min(self.max_workers, len(sources))
        logger.debug("Starting concurrent fetch for %d sources (workers=%d)", len(sources), max_workers)

        done = 0
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_map = {executor.submit(self._fetch_one, s, now): i for i, s in enumerate(sources)}
            for fut in as_completed(future_map):
                idx = future_map[fut]
                outcomes[idx] = fut.result()
                done += 1
                if on_progress is not None:
                    on_progress(done, len(sources))

        return [outcomes[i] for i in range(len(sources))]

    def load_all(
        self,
        sources: Iterable[Source],
        force_refresh: bool = False,
        *,
        now: Optional[float] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> Optional[AggregateState]:
        """Run one load cycle and commit its result.

        Raises ``NoSourcesConfigured`` for an empty source list.
        """
        if not self._in_flight.acquire(blocking=False):
            logger.debug("Load cycle already in flight; ignoring request")
            return None

        try:
            src_list = list(sources)
            if force_refresh:
                for source in src_list:
                    self.fetcher.cache.invalidate(source.url)

            if not src_list:
                raise NoSourcesConfigured("No sources configured")

            now = self.clock() if now is None else now
            outcomes = self.fetch_all(src_list, now=now, on_progress=on_progress)
            state = build_state(
                src_list,
                outcomes,
                self.settings,
                loaded_at=datetime.fromtimestamp(now, tz=timezone.utc),
            )
            self._state = state
            self.fetcher.cache.write_meta(len(src_list), now=now)

            logger.info(
                "Load cycle finished: sources=%d, failed=%d, articles=%d, from_cache=%s",
                len(src_list),
                len(state.failed),
                len(state.ranked_articles),
                state.all_from_cache,
            )
            return state
        finally:
            self._in_flight.release()


def create_aggregator(settings: BriefSettings, *, store: Optional[KeyValueStore] = None) -> Aggregator:
    """Wire the default transports and a file-backed cache from ``settings``."""
    cache = TTLCache(store or FileStore(settings.cache_dir), settings.cache_ttl_seconds)
    fetcher = SourceFetcher(
        cache,
        Rss2JsonTransport(api_key=settings.rss2json_api_key, timeout=settings.request_timeout),
        FeedTransport(proxy_prefix=settings.fallback_proxy, timeout=settings.request_timeout),
        limit=fetch_count(settings.max_per_source),
    )
    return Aggregator(fetcher, settings)
