"""Provider-native item records produced by the transports.

Each transport maps its loosely-typed payload into one of these records;
every field is optional so that a malformed item never raises.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    value = value.strip()
    return value or None


def _markup(value: Any) -> Optional[str]:
    # Summaries keep their raw markup; anything but a non-empty string is absent.
    if isinstance(value, str) and value.strip():
        return value
    return None


@dataclass(frozen=True, slots=True)
class Rss2JsonItem:
    """One entry of an rss2json ``items`` array."""

    title: Optional[str] = None
    link: Optional[str] = None
    guid: Optional[str] = None
    pub_date: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> "Rss2JsonItem":
        if not isinstance(data, Mapping):
            return cls()
        return cls(
            title=_text(data.get("title")),
            link=_text(data.get("link")),
            guid=_text(data.get("guid")),
            pub_date=_text(data.get("pubDate")),
            description=_markup(data.get("description")),
            content=_markup(data.get("content")),
        )


@dataclass(frozen=True, slots=True)
class FeedItem:
    """One RSS ``item`` or Atom ``entry`` parsed straight from the feed XML."""

    title: Optional[str] = None
    link: Optional[str] = None
    published: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: Mapping[str, Any]) -> "FeedItem":
        link = _text(entry.get("link"))
        if not link:
            for candidate in entry.get("links") or []:
                href = _text(candidate.get("href")) if isinstance(candidate, Mapping) else None
                if href:
                    link = href
                    break

        published = None
        for key in ("published", "updated"):
            published = _text(entry.get(key))
            if published:
                break

        content_val = None
        contents = entry.get("content")
        if contents and isinstance(contents, list):
            first = contents[0]
            if isinstance(first, Mapping):
                content_val = _markup(first.get("value"))

        return cls(
            title=_text(entry.get("title")),
            link=link,
            published=published,
            description=_markup(entry.get("summary")) or _markup(entry.get("description")),
            content=content_val,
        )


RawItem = Union[Rss2JsonItem, FeedItem]
