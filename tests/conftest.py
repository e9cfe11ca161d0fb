"""Shared fixtures for RSS Brief tests."""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest

from rssbrief.fetchers import TransportError
from rssbrief.models import Article, Rss2JsonItem, Source
from rssbrief.storage import MemoryStore, TTLCache

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeTransport:
    """Transport double returning canned items or raising ``TransportError``."""

    def __init__(self, name: str, items=None, error: Optional[str] = None):
        self.name = name
        self.items = list(items or [])
        self.error = error
        self.calls: List[tuple] = []

    def fetch(self, url, *, limit):
        self.calls.append((url, limit))
        if self.error is not None:
            raise TransportError(self.error)
        return list(self.items)


def make_item(title: str, minutes_ago: int = 0, link: Optional[str] = None) -> Rss2JsonItem:
    published = BASE_TIME - timedelta(minutes=minutes_ago)
    return Rss2JsonItem(
        title=title,
        link=link or f"https://example.com/{abs(hash(title))}",
        pub_date=published.isoformat(),
        description=f"<p>{title}</p>",
    )


def make_article(
    title: str,
    source_name: str = "A",
    minutes_ago: Optional[int] = 0,
    category: str = "News",
) -> Article:
    published = None if minutes_ago is None else BASE_TIME - timedelta(minutes=minutes_ago)
    return Article(
        title=title,
        link=f"https://example.com/{source_name}/{abs(hash(title))}",
        published_at=published,
        summary="",
        source_name=source_name,
        category=category,
        source_url=f"https://{source_name.lower()}.example.com/feed",
    )


@pytest.fixture
def source():
    return Source(name="A", url="https://a.example.com/feed", category="News")


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def cache(store):
    return TTLCache(store, ttl_seconds=15 * 60, clock=lambda: BASE_TIME.timestamp())
