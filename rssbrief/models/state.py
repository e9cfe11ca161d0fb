from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from .article import Article


@dataclass(frozen=True, slots=True)
class FeedStatus:
    """Outcome of fetching one source during a load cycle."""

    name: str
    category: str
    ok: bool
    count: int
    error: Optional[str] = None
    from_cache: bool = False


def _empty_mapping() -> Mapping[str, Tuple[Article, ...]]:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True)
class AggregateState:
    """Result of one complete load cycle.

    Instances are never updated in place; the aggregator builds a new one
    and swaps it in when a cycle finishes.
    """

    ranked_articles: Tuple[Article, ...] = ()
    raw_by_source: Mapping[str, Tuple[Article, ...]] = field(default_factory=_empty_mapping)
    statuses: Tuple[FeedStatus, ...] = ()
    loaded_at: Optional[datetime] = None

    @property
    def all_from_cache(self) -> bool:
        return bool(self.statuses) and all(s.from_cache for s in self.statuses)

    @property
    def failed(self) -> Tuple[FeedStatus, ...]:
        return tuple(s for s in self.statuses if not s.ok)
