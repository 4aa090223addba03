from __future__ import annotations
"""
Candidate retrieval over an in-memory catalog.

Scores every entry against the query, drops anything under the relevance
floor and returns a stable, descending ranking (ties keep catalog order).
"""

from typing import Iterable, List, Optional

from loguru import logger

from .config import MIN_SCORE_THRESHOLD
from .pipeline_types import CatalogEntry, ScoredCandidate
from .scorer import QueryView, score_entry


def sort_candidates(candidates: Iterable[ScoredCandidate]) -> List[ScoredCandidate]:
    # sorted() is stable, so equal scores stay in their incoming order
    return sorted(candidates, key=lambda c: -c.score)


def retrieve_candidates(
    entries: Iterable[CatalogEntry],
    query: str,
    limit: Optional[int] = None,
    threshold: float = MIN_SCORE_THRESHOLD,
) -> List[ScoredCandidate]:
    """
    Score all ``entries``, keep those scoring at least ``threshold`` and
    return them best-first, truncated to ``limit`` when given.
    """
    view = QueryView.from_text(query)
    scored = [score_entry(entry, view) for entry in entries]
    kept = [c for c in scored if c.score >= threshold]
    ranked = sort_candidates(kept)

    logger.debug(
        "Retrieved {} of {} entries above {:.2f} for {!r}",
        len(ranked), len(scored), threshold, query,
    )

    if limit is not None:
        ranked = ranked[:limit]
    return ranked
