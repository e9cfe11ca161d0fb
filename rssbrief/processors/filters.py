"""Views over the aggregate state: everything, one category, or one source."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Tuple, Union

from ..models import AggregateState, Article

COMBINED_LABEL = "Gov & Legal"
COMBINED_CATEGORIES: FrozenSet[str] = frozenset({"Government", "Legal"})


@dataclass(frozen=True, slots=True)
class CombinedCategory:
    """A filter label standing for several underlying categories."""

    label: str = COMBINED_LABEL
    members: FrozenSet[str] = field(default=COMBINED_CATEGORIES)

    def display_label(self, category: str) -> str:
        return self.label if category in self.members else category


@dataclass(frozen=True, slots=True)
class AllView:
    pass


@dataclass(frozen=True, slots=True)
class CategoryView:
    category: str


@dataclass(frozen=True, slots=True)
class SourceView:
    source_name: str


View = Union[AllView, CategoryView, SourceView]


def select(
    state: AggregateState,
    view: View,
    *,
    combined: CombinedCategory = CombinedCategory(),
) -> Tuple[Article, ...]:
    """Return the articles to present for ``view``.

    ``SourceView`` reads the per-source raw list, which is not deduplicated
    against other sources.
    """
    if isinstance(view, AllView):
        return state.ranked_articles
    if isinstance(view, CategoryView):
        if view.category == combined.label:
            return tuple(a for a in state.ranked_articles if a.category in combined.members)
        return tuple(a for a in state.ranked_articles if a.category == view.category)
    if isinstance(view, SourceView):
        return tuple(state.raw_by_source.get(view.source_name, ()))
    raise TypeError(f"Unsupported view: {view!r}")


def display_categories(
    articles: Iterable[Article],
    *,
    combined: CombinedCategory = CombinedCategory(),
) -> List[str]:
    """Sorted distinct filter labels for ``articles``."""
    labels = {combined.display_label(a.category) for a in articles if a.category}
    return sorted(labels)

