from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

UNCATEGORIZED = "Uncategorized"


@dataclass(frozen=True, slots=True)
class Source:
    """Configuration for one content feed.

    The ``url`` is the source's identity for caching.
    """

    name: str
    url: str
    category: Optional[str] = None

    @property
    def display_category(self) -> str:
        return self.category or UNCATEGORIZED
