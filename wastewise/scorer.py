# wastewise/scorer.py
from __future__ import annotations

"""
Score one query against one catalog entry.

Every strategy is a pure function ``(entry, query_view) -> (score, MatchType)``.
The two exact strategies short-circuit; the graded ones are folded with
``max`` (never summed), so several weak signals cannot add up to a confident
match. On exact ties the strategy evaluated first keeps the win.
"""

import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from . import config
from .normalize import normalize_for_comparison, tokenize, trigram_similarity
from .pipeline_types import CatalogEntry, MatchType, ScoredCandidate

StrategyResult = Tuple[float, MatchType]

_NO_MATCH: StrategyResult = (0.0, MatchType.TRIGRAM)


def round_score(value: float) -> float:
    """Round half-up to two decimals and clamp into [0, 1]."""
    rounded = math.floor(value * 100 + 0.5) / 100
    return min(1.0, max(0.0, rounded))


@dataclass(frozen=True)
class QueryView:
    """The query as each strategy wants to see it, computed once."""

    raw: str
    compare: str
    tokens: Tuple[str, ...]

    @classmethod
    def from_text(cls, query: str) -> "QueryView":
        return cls(
            raw=query,
            compare=normalize_for_comparison(query),
            tokens=tuple(tokenize(query)),
        )


def _all_names(entry: CatalogEntry) -> List[str]:
    return [entry.name, *entry.aliases]


def _keep_best(best: StrategyResult, score: float, match_type: MatchType) -> StrategyResult:
    return (score, match_type) if score > best[0] else best


# ---------------------------------------------------------------------------
# Short-circuit strategies
# ---------------------------------------------------------------------------


def exact_name(entry: CatalogEntry, q: QueryView) -> Optional[StrategyResult]:
    if normalize_for_comparison(entry.name) == q.compare:
        return config.EXACT_NAME_SCORE, MatchType.EXACT_NAME
    return None


def exact_alias(entry: CatalogEntry, q: QueryView) -> Optional[StrategyResult]:
    for alias in entry.aliases:
        if normalize_for_comparison(alias) == q.compare:
            return config.EXACT_ALIAS_SCORE, MatchType.EXACT_ALIAS
    return None


# ---------------------------------------------------------------------------
# Graded strategies
# ---------------------------------------------------------------------------


def partial_containment(entry: CatalogEntry, q: QueryView) -> StrategyResult:
    best = _NO_MATCH
    for name in _all_names(entry):
        norm_name = normalize_for_comparison(name)
        if not norm_name:
            continue
        if norm_name in q.compare or q.compare in norm_name:
            shorter, longer = sorted((len(norm_name), len(q.compare)))
            score = config.PARTIAL_BASE_SCORE + (shorter / longer) * config.PARTIAL_LENGTH_WEIGHT
            best = _keep_best(best, score, MatchType.PARTIAL)
    return best


def _tokens_match(query_token: str, name_token: str) -> bool:
    if query_token == name_token:
        return True
    min_len = config.TOKEN_SUBSTRING_MIN_LEN
    if len(query_token) >= min_len and len(name_token) >= min_len:
        return query_token in name_token or name_token in query_token
    return False


def token_overlap(entry: CatalogEntry, q: QueryView) -> StrategyResult:
    best = _NO_MATCH
    if not q.tokens:
        return best
    for name in _all_names(entry):
        name_tokens = tokenize(name)
        if not name_tokens:
            continue
        matched = sum(
            1 for qt in q.tokens if any(_tokens_match(qt, nt) for nt in name_tokens)
        )
        if matched == 0:
            continue
        overlap = matched / max(len(q.tokens), len(name_tokens))
        best = _keep_best(best, overlap * config.TOKEN_OVERLAP_WEIGHT, MatchType.TOKEN)
    return best


def attribute_tags(entry: CatalogEntry, q: QueryView) -> StrategyResult:
    best = _NO_MATCH
    for tag in entry.attribute_tags:
        tag_text = tag.lower().replace("-", " ")
        if len(tag_text) < config.ATTRIBUTE_MIN_LEN:
            continue
        if tag_text in q.compare or (
            len(tag_text) >= config.ATTRIBUTE_CONTAINS_QUERY_MIN_LEN and q.compare in tag_text
        ):
            best = _keep_best(best, config.ATTRIBUTE_SCORE, MatchType.ATTRIBUTE)
    return best


def example_match(entry: CatalogEntry, q: QueryView) -> StrategyResult:
    best = _NO_MATCH
    for example in entry.examples:
        if normalize_for_comparison(example) == q.compare:
            best = _keep_best(best, config.EXAMPLE_EXACT_SCORE, MatchType.EXACT_ALIAS)
        sim = trigram_similarity(example, q.raw)
        best = _keep_best(best, sim * config.EXAMPLE_TRIGRAM_WEIGHT, MatchType.TRIGRAM)
    return best


def trigram_fallback(entry: CatalogEntry, q: QueryView) -> StrategyResult:
    best = _NO_MATCH
    for name in _all_names(entry):
        sim = trigram_similarity(name, q.raw)
        best = _keep_best(best, sim * config.NAME_TRIGRAM_WEIGHT, MatchType.TRIGRAM)
    return best


SHORT_CIRCUIT_STRATEGIES: Sequence[Callable[[CatalogEntry, QueryView], Optional[StrategyResult]]] = (
    exact_name,
    exact_alias,
)

GRADED_STRATEGIES: Sequence[Callable[[CatalogEntry, QueryView], StrategyResult]] = (
    partial_containment,
    token_overlap,
    attribute_tags,
    example_match,
    trigram_fallback,
)


# ---------------------------------------------------------------------------
# Main entry
# ---------------------------------------------------------------------------


def score_entry(entry: CatalogEntry, query: str | QueryView) -> ScoredCandidate:
    """
    Best score in [0, 1] for ``entry`` against ``query`` and the strategy
    that produced it. A query with nothing comparable left scores 0.
    """
    q = query if isinstance(query, QueryView) else QueryView.from_text(query)
    if not q.compare:
        return ScoredCandidate(entry=entry, score=0.0, match_type=MatchType.TRIGRAM)

    for strategy in SHORT_CIRCUIT_STRATEGIES:
        hit = strategy(entry, q)
        if hit is not None:
            return ScoredCandidate(entry=entry, score=hit[0], match_type=hit[1])

    best = _NO_MATCH
    for strategy in GRADED_STRATEGIES:
        score, match_type = strategy(entry, q)
        best = _keep_best(best, score, match_type)

    return ScoredCandidate(entry=entry, score=round_score(best[0]), match_type=best[1])
