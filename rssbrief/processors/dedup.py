from __future__ import annotations

import re
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Sequence

from ..models import Article

DEFAULT_THRESHOLD = 0.72
MIN_TOKEN_LENGTH = 3

_non_word_re = re.compile(r"[^\w\s]|_")
_whitespace_re = re.compile(r"\s+")


def normalize_title(title: str | None) -> str:
    """Lowercase, drop punctuation and collapse whitespace."""
    text = (title or "").casefold()
    text = _non_word_re.sub(" ", text)
    return _whitespace_re.sub(" ", text).strip()


def title_tokens(title: str | None) -> FrozenSet[str]:
    return frozenset(w for w in normalize_title(title).split(" ") if len(w) >= MIN_TOKEN_LENGTH)


def _jaccard(a: FrozenSet[str], b: FrozenSet[str]) -> float:
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0
    common = len(a & b)
    return common / (len(a) + len(b) - common)


def title_similarity(a: str | None, b: str | None) -> float:
    """Jaccard index over the significant words of two titles."""
    return _jaccard(title_tokens(a), title_tokens(b))


@dataclass(slots=True)
class Deduplicator:
    """Drop articles whose titles nearly repeat an earlier kept article.

    Greedy and order-preserving: the first article of a near-duplicate
    cluster wins, so a recency-sorted input keeps the most recent one.
    Cost is quadratic in the number of kept articles.
    """

    threshold: float = DEFAULT_THRESHOLD

    def __post_init__(self) -> None:
        if not 0.0 <= self.threshold <= 1.0:
            raise ValueError(f"threshold must be within [0, 1], got {self.threshold}")

    def is_duplicate(self, tokens: FrozenSet[str], kept: Sequence[FrozenSet[str]]) -> bool:
        return any(_jaccard(tokens, other) >= self.threshold for other in kept)

    def dedupe(self, articles: Iterable[Article]) -> List[Article]:
        kept: List[Article] = []
        kept_tokens: List[FrozenSet[str]] = []
        for candidate in articles:
            tokens = title_tokens(candidate.title)
            if self.is_duplicate(tokens, kept_tokens):
                continue
            kept.append(candidate)
            kept_tokens.append(tokens)
        return kept


def remove_duplicates(articles: Iterable[Article], *, threshold: float = DEFAULT_THRESHOLD) -> List[Article]:
    return Deduplicator(threshold=threshold).dedupe(articles)
