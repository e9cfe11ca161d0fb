from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence

from ..models import UNCATEGORIZED, AggregateState, Article, FeedStatus
from ..processors import clean_html_to_text
from ..storage import CacheMeta

PREVIEW_CHARS = 300

_STATUS_ICONS = {"fail": "✗", "cache": "↩", "ok": "✓"}


def relative_time(value: Optional[datetime], now: datetime) -> str:
    if value is None:
        return ""
    s = int((now - value).total_seconds())
    if s < 0:
        return "just now"
    if s < 60:
        return f"{s}s ago"
    if s < 3600:
        return f"{s // 60}m ago"
    if s < 86400:
        return f"{s // 3600}h ago"
    return f"{s // 86400}d ago"


def format_date(value: Optional[datetime], now: datetime) -> str:
    if value is None:
        return ""
    formatted = f"{value:%b} {value.day}, {value.year} {value:%H:%M}"
    rel = relative_time(value, now)
    return f"{formatted} ({rel})" if rel else formatted


def preview(summary: str, limit: int = PREVIEW_CHARS) -> str:
    text = clean_html_to_text(summary)
    if len(text) > limit:
        return text[: limit - 3] + "…"
    return text


def format_article(article: Article, now: datetime) -> str:
    meta = [article.source_name]
    when = format_date(article.published_at, now)
    if when:
        meta.append(when)
    if article.category:
        meta.append(f"[{article.category}]")

    lines = [" · ".join(meta), f"  {article.title}", f"  {article.link}"]
    text = preview(article.summary)
    if text:
        lines.append(f"  {text}")
    return "\n".join(lines)


def format_articles(articles: Sequence[Article], now: datetime) -> str:
    if not articles:
        return "No articles available."
    return "\n\n".join(format_article(a, now) for a in articles)


def format_header(title: str, now: datetime) -> str:
    return f"{title}\n" + f"{now:%A, %B} {now.day}, {now.year}".upper()


def format_stats(
    count: int,
    state: AggregateState,
    now: datetime,
    meta: Optional[CacheMeta] = None,
) -> str:
    label = f"{count} ARTICLE{'' if count == 1 else 'S'}"
    mode = "Cached" if state.all_from_cache else "Live"
    parts = [label, mode]
    if meta is not None:
        saved = datetime.fromtimestamp(meta.saved_at, tz=timezone.utc)
        parts.append(relative_time(saved, now))
    failed = len(state.failed)
    if failed:
        parts.append(f"⚠{failed}")
    return " · ".join(parts)


def _status_kind(status: FeedStatus) -> str:
    if status.error:
        return "fail"
    return "cache" if status.from_cache else "ok"


def format_sources_panel(statuses: Iterable[FeedStatus], active_source: Optional[str] = None) -> str:
    """Render per-source outcomes grouped by category."""
    groups: Dict[str, List[FeedStatus]] = defaultdict(list)
    for status in statuses:
        groups[status.category or UNCATEGORIZED].append(status)

    blocks: List[str] = []
    for category in sorted(groups):
        lines = [category]
        for status in groups[category]:
            marker = ">" if status.name == active_source else " "
            line = f"{marker} {_STATUS_ICONS[_status_kind(status)]} {status.name}"
            if status.error:
                line += f" ({status.error})"
            lines.append(line)
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)
