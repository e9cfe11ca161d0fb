from __future__ import annotations

from typing import Dict, List, Protocol

from ..models import RawItem

DEFAULT_TIMEOUT = 15

DEFAULT_HEADERS: Dict[str, str] = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/127.0.0.0 Safari/537.36"
    )
}


class TransportError(Exception):
    """Any failure to obtain items from a transport.

    Covers bad HTTP status, network errors and unusable payloads alike.
    """


class Transport(Protocol):
    name: str

    def fetch(self, url: str, *, limit: int) -> List[RawItem]: ...
