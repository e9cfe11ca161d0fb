"""Top-level package for RSS Brief.

Aggregates many RSS/Atom feeds into one ranked, deduplicated list that can
be viewed whole, by category, or by source.
"""

__all__ = []
