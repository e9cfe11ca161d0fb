"""Transports and the per-source fetcher."""

from .base import Transport, TransportError
from .rss2json import Rss2JsonTransport
from .rss import FeedTransport
from .source_fetcher import FetchOutcome, SourceFetcher, fetch_count

__all__ = [
    "Transport",
    "TransportError",
    "Rss2JsonTransport",
    "FeedTransport",
    "FetchOutcome",
    "SourceFetcher",
    "fetch_count",
]
