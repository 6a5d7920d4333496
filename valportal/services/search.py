"""Fuzzy search over sitemap resources."""

from __future__ import annotations

import re
from dataclasses import dataclass
from difflib import SequenceMatcher
from typing import Iterable, Sequence

from valportal.domain.models import SitemapResource

DEFAULT_THRESHOLD = 0.3
DEFAULT_LIMIT = 12
SUBSTRING_SCORE = 0.8

_WORD_RE = re.compile(r"[\w']+")


@dataclass(frozen=True)
class SearchKey:
    attribute: str
    weight: float


DEFAULT_KEYS: tuple[SearchKey, ...] = (
    SearchKey("name", 2.0),
    SearchKey("description", 1.0),
    SearchKey("sitemap_group1", 0.5),
    SearchKey("sitemap_group2", 0.5),
)


@dataclass(frozen=True)
class SearchMatch:
    resource: SitemapResource
    score: float


def _normalize(text: str) -> str:
    return " ".join(text.lower().split())


def similarity(query: str, text: str | None) -> float:
    """Similarity of ``query`` to ``text`` in ``[0, 1]``.

    The query is compared to the whole text and to each of its words; the
    best ``SequenceMatcher`` ratio wins. A substring hit scores at least
    ``SUBSTRING_SCORE``.
    """
    if not text:
        return 0.0
    query_normalized = _normalize(query)
    text_normalized = _normalize(text)
    if not query_normalized:
        return 0.0

    candidates = [text_normalized, *_WORD_RE.findall(text_normalized)]
    score = max(
        SequenceMatcher(None, query_normalized, candidate).ratio()
        for candidate in candidates
    )
    if query_normalized in text_normalized:
        score = max(score, SUBSTRING_SCORE)
    return score


class ResourceSearch:
    """Weighted fuzzy matcher over a fixed resource list.

    A resource matches when any key's similarity is within ``threshold`` of a
    perfect match. Matches are ranked by their best weighted key score.
    """

    def __init__(
        self,
        resources: Iterable[SitemapResource],
        *,
        keys: Sequence[SearchKey] = DEFAULT_KEYS,
        threshold: float = DEFAULT_THRESHOLD,
    ) -> None:
        self._resources = list(resources)
        self._keys = tuple(keys)
        self._threshold = threshold
        self._max_weight = max((k.weight for k in self._keys), default=1.0)

    def _score(self, query: str, resource: SitemapResource) -> float | None:
        best: float | None = None
        for key in self._keys:
            value = getattr(resource, key.attribute, None)
            score = similarity(query, value)
            if 1.0 - score > self._threshold:
                continue
            weighted = score * key.weight / self._max_weight
            if best is None or weighted > best:
                best = weighted
        return best

    def search_with_scores(
        self, query: str, limit: int = DEFAULT_LIMIT
    ) -> list[SearchMatch]:
        if not query or not query.strip():
            return []
        matches: list[SearchMatch] = []
        for resource in self._resources:
            score = self._score(query, resource)
            if score is not None:
                matches.append(SearchMatch(resource=resource, score=score))
        # sorted() is stable: equal scores keep catalog order.
        matches = sorted(matches, key=lambda m: m.score, reverse=True)
        return matches[:limit]

    def search(self, query: str, limit: int = DEFAULT_LIMIT) -> list[SitemapResource]:
        return [m.resource for m in self.search_with_scores(query, limit)]
