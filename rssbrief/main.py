"""Application entrypoint for RSS Brief.

This script runs one load cycle and prints a view of the result:
1) load configuration
2) fetch, rank and deduplicate all sources
3) render the selected view and the per-source status panel
"""

from __future__ import annotations

import argparse
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv

from .orchestrator import NoSourcesConfigured, create_aggregator
from .output.text_formatter import (
    format_articles,
    format_header,
    format_sources_panel,
    format_stats,
)
from .processors import AllView, CategoryView, CombinedCategory, SourceView, View, display_categories, select
from .utils.config_loader import ConfigError, load_config
from .utils.logging import configure_logging, get_logger


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="RSS Brief – aggregate, rank, and deduplicate feeds"
    )
    parser.add_argument(
        "--config",
        default="config/sources.yaml",
        help="Path to sources configuration file (YAML)",
    )
    parser.add_argument(
        "--refresh",
        action="store_true",
        help="Ignore cached feeds and fetch every source live",
    )
    view = parser.add_mutually_exclusive_group()
    view.add_argument("--category", help="Only show articles from this category")
    view.add_argument("--source", help="Show the most recent articles from one source")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity",
    )
    return parser.parse_args()


def _view_from_args(args: argparse.Namespace) -> View:
    if args.source:
        return SourceView(args.source)
    if args.category:
        return CategoryView(args.category)
    return AllView()


def main() -> int:
    load_dotenv(override=False)
    args = parse_args()
    configure_logging(level=args.log_level)
    logger = get_logger("rssbrief.cli")

    config_path = Path(args.config)
    logger.info("Loading configuration from %s", config_path)
    try:
        config = load_config(config_path)
    except ConfigError as exc:
        logger.error("Failed to load configuration: %s", exc)
        return 1

    settings = config.settings
    combined = CombinedCategory(settings.combined_label, frozenset(settings.combined_categories))
    aggregator = create_aggregator(settings)

    def _progress(done: int, total: int) -> None:
        logger.debug("Loaded %d / %d feeds", done, total)

    try:
        state = aggregator.load_all(config.sources, force_refresh=args.refresh, on_progress=_progress)
    except NoSourcesConfigured:
        print(f"No sources configured. Add feeds to the 'sources' list in {config_path}.")
        return 2
    if state is None:
        state = aggregator.state

    now = datetime.now(timezone.utc)
    articles = select(state, _view_from_args(args), combined=combined)

    print(format_header(config.title, now))
    print(format_stats(len(articles), state, now, aggregator.fetcher.cache.read_meta()))
    print("Filters: " + " | ".join(["All", *display_categories(state.ranked_articles, combined=combined)]))
    print()
    print(format_articles(articles, now))
    print()
    print(format_sources_panel(state.statuses, active_source=args.source))
    return 0


if __name__ == "__main__":  # pragma: no cover - script entrypoint
    raise SystemExit(main())
