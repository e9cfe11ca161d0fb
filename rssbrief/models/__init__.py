"""Typed models used across the application."""

from .source import Source, UNCATEGORIZED
from .article import Article
from .state import AggregateState, FeedStatus
from .raw_item import FeedItem, RawItem, Rss2JsonItem

__all__ = [
    "Source",
    "UNCATEGORIZED",
    "Article",
    "AggregateState",
    "FeedStatus",
    "FeedItem",
    "RawItem",
    "Rss2JsonItem",
]
