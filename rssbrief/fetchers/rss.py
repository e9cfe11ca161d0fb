from __future__ import annotations

from typing import List, Optional
from urllib.parse import quote

import feedparser
import requests

from ..models import FeedItem, RawItem
from ..utils.logging import get_logger
from .base import DEFAULT_HEADERS, DEFAULT_TIMEOUT, TransportError

logger = get_logger("rssbrief.fetchers.rss")


class FeedTransport:
    """Download the feed XML and parse RSS items / Atom entries.

    With ``proxy_prefix`` set, the request goes to the prefix followed by the
    percent-encoded feed URL (e.g. ``https://corsproxy.io/?``).
    """

    name = "feed"

    def __init__(self, *, proxy_prefix: Optional[str] = None, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.proxy_prefix = proxy_prefix
        self.timeout = timeout

    def request_url(self, url: str) -> str:
        if self.proxy_prefix:
            return self.proxy_prefix + quote(url, safe="")
        return url

    def fetch(self, url: str, *, limit: int) -> List[RawItem]:
        # ``limit`` is advisory here; every entry in the document is returned.
        target = self.request_url(url)
        logger.debug("Fetching feed XML from %s", target)
        try:
            resp = requests.get(target, headers=DEFAULT_HEADERS, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TransportError(str(exc)) from exc
        if not resp.ok:
            raise TransportError(f"HTTP {resp.status_code}")

        parsed = feedparser.parse(resp.content)
        entries = getattr(parsed, "entries", []) or []
        if getattr(parsed, "bozo", False):
            # feedparser sets bozo on feed errors but may still recover entries
            bozo_exc = getattr(parsed, "bozo_exception", None)
            if not entries:
                raise TransportError(f"Malformed feed: {bozo_exc}")
            logger.debug("Feed 'bozo' flagged for %s: %s", url, bozo_exc)

        return [FeedItem.from_entry(entry) for entry in entries]
