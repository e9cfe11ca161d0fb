from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


@dataclass(slots=True)
class BriefSettings:
    """Tunables for one load cycle."""

    total_articles: int = field(default_factory=lambda: _env_int("BRIEF_TOTAL_ARTICLES", 30))
    max_per_source: int = field(default_factory=lambda: _env_int("BRIEF_MAX_PER_SOURCE", 5))
    cache_ttl_minutes: float = field(default_factory=lambda: _env_float("BRIEF_CACHE_TTL_MINUTES", 15))
    dedup_threshold: float = field(default_factory=lambda: _env_float("BRIEF_DEDUP_THRESHOLD", 0.72))
    # Length of the single-source view; independent of the other caps.
    raw_view_limit: int = field(default_factory=lambda: _env_int("BRIEF_RAW_VIEW_LIMIT", 15))
    rss2json_api_key: Optional[str] = field(default_factory=lambda: os.getenv("RSS2JSON_API_KEY") or None)
    fallback_proxy: Optional[str] = field(default_factory=lambda: os.getenv("BRIEF_FALLBACK_PROXY") or None)
    request_timeout: float = field(default_factory=lambda: _env_float("BRIEF_REQUEST_TIMEOUT", 15))
    cache_dir: str = field(default_factory=lambda: os.getenv("BRIEF_CACHE_DIR", ".cache/feeds"))
    combined_label: str = "Gov & Legal"
    combined_categories: Tuple[str, ...] = ("Government", "Legal")

    @property
    def cache_ttl_seconds(self) -> float:
        return self.cache_ttl_minutes * 60
