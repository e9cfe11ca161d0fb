from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List
from urllib.parse import urlparse

import yaml

from ..models import Source
from .pipeline_config import BriefSettings


class ConfigError(Exception):
    """Raised when the configuration file is invalid or missing required fields."""


REQUIRED_FIELDS = {"name", "url"}
DEFAULT_TITLE = "RSS Brief"

_SETTING_NAMES = {f.name for f in fields(BriefSettings)}


@dataclass(slots=True)
class BriefConfig:
    title: str = DEFAULT_TITLE
    settings: BriefSettings = field(default_factory=BriefSettings)
    sources: List[Source] = field(default_factory=list)


def _validate_source_dict(entry: dict) -> None:
    """Validate a single source mapping from YAML.

    Required fields: name (str), url (http/https).
    Optional fields:
      - category: str
    """
    missing = REQUIRED_FIELDS - set(entry)
    if missing:
        raise ConfigError(f"Missing required fields: {sorted(missing)} in {entry}")

    if not str(entry["name"]).strip():
        raise ConfigError(f"Source name must not be empty: {entry}")

    url_str = str(entry["url"]).strip()
    parsed = urlparse(url_str)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(f"Invalid URL '{url_str}'. Must be absolute http(s) URL.")

    category = entry.get("category")
    if category is not None and not isinstance(category, str):
        raise ConfigError("'category' must be a string if provided")


def _coerce_source(entry: dict) -> Source:
    category = (entry.get("category") or "").strip()
    return Source(
        name=str(entry["name"]).strip(),
        url=str(entry["url"]).strip(),
        category=category or None,
    )


def _coerce_settings(raw: Dict[str, Any]) -> BriefSettings:
    unknown = set(raw) - _SETTING_NAMES
    if unknown:
        raise ConfigError(f"Unknown settings: {sorted(unknown)}")
    if "combined_categories" in raw:
        raw = {**raw, "combined_categories": tuple(raw["combined_categories"] or ())}
    settings = BriefSettings(**raw)
    validate_settings(settings)
    return settings


def validate_settings(settings: BriefSettings) -> None:
    if settings.total_articles < 1:
        raise ConfigError("'total_articles' must be at least 1")
    if settings.max_per_source < 1:
        raise ConfigError("'max_per_source' must be at least 1")
    if settings.cache_ttl_minutes < 0:
        raise ConfigError("'cache_ttl_minutes' must not be negative")
    if not 0.0 <= settings.dedup_threshold <= 1.0:
        raise ConfigError("'dedup_threshold' must be within [0, 1]")
    if settings.raw_view_limit < 1:
        raise ConfigError("'raw_view_limit' must be at least 1")
    if settings.request_timeout <= 0:
        raise ConfigError("'request_timeout' must be positive")


def load_config(path: Path | str) -> BriefConfig:
    """Load ``sources.yaml`` into a ``BriefConfig``.

    YAML structure:

    title: RSS Brief
    settings:
      total_articles: 30
      max_per_source: 5
    sources:
      - name: Example
        url: https://example.com/feed.xml
        category: News

    Settings left out of the file keep their environment/default values.
    Unknown top-level keys are ignored for forward compatibility.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("Top level of the configuration must be a mapping")

    settings_raw = data.get("settings")
    if settings_raw is None:
        settings_raw = {}
    if not isinstance(settings_raw, dict):
        raise ConfigError("'settings' must be a mapping in the YAML configuration")
    try:
        settings = _coerce_settings(settings_raw)
    except (TypeError, ValueError) as exc:
        # ValueError comes from malformed BRIEF_* environment overrides
        raise ConfigError(f"Invalid settings: {exc}") from exc

    sources_raw = data.get("sources")
    if sources_raw is None:
        sources_raw = []
    if not isinstance(sources_raw, list):
        raise ConfigError("'sources' must be a list in the YAML configuration")

    sources: List[Source] = []
    for item in sources_raw:
        if not isinstance(item, dict):
            raise ConfigError(f"Each source must be a mapping, got: {type(item)}")
        _validate_source_dict(item)
        source = _coerce_source(item)
        if any(s.name == source.name for s in sources):
            raise ConfigError(f"Duplicate source name: {source.name!r}")
        sources.append(source)

    return BriefConfig(
        title=str(data.get("title") or DEFAULT_TITLE),
        settings=settings,
        sources=sources,
    )
