"""Processing steps: normalization, deduplication, and view filtering."""

from .normalize import clean_html_to_text, normalize_item, normalize_items, parse_datetime
from .dedup import Deduplicator, normalize_title, remove_duplicates, title_similarity
from .filters import AllView, CategoryView, CombinedCategory, SourceView, View, display_categories, select

__all__ = [
    "clean_html_to_text",
    "normalize_item",
    "normalize_items",
    "parse_datetime",
    "Deduplicator",
    "normalize_title",
    "remove_duplicates",
    "title_similarity",
    "AllView",
    "CategoryView",
    "CombinedCategory",
    "SourceView",
    "View",
    "display_categories",
    "select",
]
