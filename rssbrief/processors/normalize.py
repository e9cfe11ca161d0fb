from __future__ import annotations

import html
import re
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from bs4 import BeautifulSoup
from dateutil import parser as date_parser

from ..models import Article, FeedItem, RawItem, Rss2JsonItem, Source
from ..utils.logging import get_logger

UNTITLED = "Untitled"

_whitespace_re = re.compile(r"\s+")

_logger = get_logger("rssbrief.processors.normalize")


def clean_html_to_text(raw_html: str | None) -> str:
    """Clean HTML to normalized plain text.

    - Strip tags
    - Unescape HTML entities
    - Collapse whitespace
    """
    if not raw_html:
        return ""

    soup = BeautifulSoup(raw_html, "html.parser")
    text = soup.get_text(" ")
    text = html.unescape(text)
    text = _whitespace_re.sub(" ", text)
    return text.strip()


def parse_datetime(value: str | datetime | None) -> Optional[datetime]:
    """Parse a feed timestamp into an aware UTC-based datetime.

    Returns ``None`` for missing or unparsable values; never raises.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if not text:
            return None
        try:
            parsed = date_parser.parse(text)
        except (ValueError, TypeError, OverflowError):
            _logger.debug("Unparsable publish date: %r", value)
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _from_rss2json(item: Rss2JsonItem, source: Source) -> Article:
    return Article(
        title=item.title or UNTITLED,
        link=item.link or item.guid or "",
        published_at=parse_datetime(item.pub_date),
        summary=item.description or item.content or "",
        source_name=source.name,
        category=source.display_category,
        source_url=source.url,
    )


def _from_feed(item: FeedItem, source: Source) -> Article:
    return Article(
        title=item.title or UNTITLED,
        link=item.link or "",
        published_at=parse_datetime(item.published),
        summary=item.description or item.content or "",
        source_name=source.name,
        category=source.display_category,
        source_url=source.url,
    )


def normalize_item(item: RawItem, source: Source) -> Article:
    """Convert a transport's raw item into an ``Article``.

    Summaries are kept as delivered, markup included.
    """
    if isinstance(item, Rss2JsonItem):
        return _from_rss2json(item, source)
    if isinstance(item, FeedItem):
        return _from_feed(item, source)
    raise TypeError(f"Unsupported raw item type: {type(item).__name__}")


def normalize_items(items: Iterable[RawItem], source: Source) -> List[Article]:
    return [normalize_item(item, source) for item in items]
