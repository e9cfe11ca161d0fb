from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from dateutil import parser as date_parser


@dataclass(frozen=True, slots=True)
class Article:
    title: str
    link: str
    published_at: Optional[datetime]
    summary: str
    source_name: str
    category: str
    source_url: str

    @property
    def sort_timestamp(self) -> float:
        # Missing publish dates sort as the epoch.
        return self.published_at.timestamp() if self.published_at else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "link": self.link,
            "published_at": self.published_at.isoformat() if self.published_at else None,
            "summary": self.summary,
            "source_name": self.source_name,
            "category": self.category,
            "source_url": self.source_url,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Article":
        published = data.get("published_at")
        published_at = None
        if published:
            published_at = date_parser.isoparse(published)
            if published_at.tzinfo is None:
                published_at = published_at.replace(tzinfo=timezone.utc)
        return cls(
            title=str(data.get("title") or ""),
            link=str(data.get("link") or ""),
            published_at=published_at,
            summary=str(data.get("summary") or ""),
            source_name=str(data.get("source_name") or ""),
            category=str(data.get("category") or ""),
            source_url=str(data.get("source_url") or ""),
        )
