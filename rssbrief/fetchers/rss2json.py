from __future__ import annotations

from typing import List, Optional

import requests

from ..models import RawItem, Rss2JsonItem
from ..utils.logging import get_logger
from .base import DEFAULT_HEADERS, DEFAULT_TIMEOUT, TransportError

logger = get_logger("rssbrief.fetchers.rss2json")

API_URL = "https://api.rss2json.com/v1/api.json"


class Rss2JsonTransport:
    """Fetch a feed through the rss2json conversion API."""

    name = "rss2json"

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        api_url: str = API_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout

    def fetch(self, url: str, *, limit: int) -> List[RawItem]:
        params = {
            "rss_url": url,
            "count": str(limit),
            "order_by": "pubDate",
            "order_dir": "desc",
        }
        if self.api_key:
            params["api_key"] = self.api_key

        logger.debug("Fetching %s via rss2json", url)
        try:
            resp = requests.get(self.api_url, params=params, headers=DEFAULT_HEADERS, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TransportError(str(exc)) from exc
        if not resp.ok:
            raise TransportError(f"HTTP {resp.status_code}")

        try:
            payload = resp.json()
        except ValueError as exc:
            raise TransportError("rss2json returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise TransportError("rss2json returned an unexpected payload")
        if payload.get("status") != "ok":
            raise TransportError(payload.get("message") or "rss2json error")

        items = payload.get("items") or []
        if not isinstance(items, list):
            raise TransportError("rss2json returned an unexpected payload")
        return [Rss2JsonItem.from_payload(item) for item in items]
