"""Unit tests for plain-text rendering."""

from datetime import timedelta

from rssbrief.models import AggregateState, FeedStatus, Rss2JsonItem
from rssbrief.output.text_formatter import (
    format_article,
    format_articles,
    format_sources_panel,
    format_stats,
    preview,
    relative_time,
)
from rssbrief.processors import normalize_item
from rssbrief.storage import CacheMeta

from conftest import BASE_TIME, make_article


class TestRelativeTime:
    def test_buckets(self):
        assert relative_time(BASE_TIME - timedelta(seconds=30), BASE_TIME) == "30s ago"
        assert relative_time(BASE_TIME - timedelta(minutes=5), BASE_TIME) == "5m ago"
        assert relative_time(BASE_TIME - timedelta(hours=3), BASE_TIME) == "3h ago"
        assert relative_time(BASE_TIME - timedelta(days=2), BASE_TIME) == "2d ago"

    def test_future_and_missing(self):
        assert relative_time(BASE_TIME + timedelta(minutes=1), BASE_TIME) == "just now"
        assert relative_time(None, BASE_TIME) == ""


def test_preview_strips_markup_and_clips():
    assert preview("<p>Hello <b>world</b></p>") == "Hello world"
    clipped = preview("word " * 100)
    assert len(clipped) == 298
    assert clipped.endswith("…")


def test_format_article():
    article = make_article("Budget passes", "Gazette", minutes_ago=5)
    text = format_article(article, BASE_TIME)
    first, title, link = text.splitlines()
    assert first.startswith("Gazette · May 1, 2024 11:55 (5m ago)")
    assert first.endswith("[News]")
    assert title.strip() == "Budget passes"
    assert link.strip() == article.link



def test_format_article_with_junk_summary(source):
    item = Rss2JsonItem.from_payload({"title": "Odd", "link": "https://x/odd", "description": ["<p>x</p>"]})
    text = format_article(normalize_item(item, source), BASE_TIME)
    assert text.splitlines()[1].strip() == "Odd"
    assert len(text.splitlines()) == 3

def test_format_articles_empty():
    assert format_articles([], BASE_TIME) == "No articles available."


def test_format_stats():
    state = AggregateState(
        statuses=(
            FeedStatus("A", "News", ok=True, count=2, from_cache=True),
            FeedStatus("B", "News", ok=False, count=0, error="HTTP 500"),
        )
    )
    meta = CacheMeta(saved_at=(BASE_TIME - timedelta(minutes=2)).timestamp(), feed_count=2)
    assert format_stats(1, state, BASE_TIME, meta) == "1 ARTICLE · Live · 2m ago · ⚠1"


def test_sources_panel_groups_by_category():
    statuses = [
        FeedStatus("Tech Daily", "Tech", ok=True, count=3),
        FeedStatus("Gazette", "News", ok=True, count=5, from_cache=True),
        FeedStatus("Wire", "News", ok=False, count=0, error="HTTP 404"),
    ]
    panel = format_sources_panel(statuses, active_source="Wire")
    assert panel == (
        "News\n"
        "  ↩ Gazette\n"
        "> ✗ Wire (HTTP 404)\n"
        "\n"
        "Tech\n"
        "  ✓ Tech Daily"
    )
