from __future__ import annotations

from typing import List

from loguru import logger

from . import config
from .confidence import compute_confidence
from .config import Provider
from .pipeline_types import MatchResult, MaterialMatch
from .retrieval import retrieve_candidates


def match_material(provider: Provider, query: str) -> MatchResult:
    """
    Match ``query`` directly against one jurisdiction's material list.

    Simpler sibling of the concept pipeline: the query is only trimmed (no
    packaging-phrase stripping), and there is no vision boost or follow-up.
    """
    trimmed = (query or "").strip()
    if not trimmed:
        return MatchResult(best=None, matches=[], confidence=0.0, rationale=["Empty query provided"])

    scored = retrieve_candidates(provider.materials, trimmed)

    if not scored:
        logger.info("No materials matched {!r} in {}", trimmed, provider.id)
        return MatchResult(
            best=None,
            matches=[],
            confidence=0.0,
            rationale=[
                f'No materials matched "{trimmed}" in {provider.display_name}',
                "Try a different search term or check spelling",
            ],
        )

    best = scored[0]
    matches = [
        MaterialMatch(material=c.entry, score=c.score)
        for c in scored[: config.MATERIAL_MATCHES_LIMIT]
    ]

    rationale: List[str] = [
        f'Best match: "{best.entry.name}" ({best.match_type.value}, score: {best.score})'
    ]
    others = len(scored) - 1
    if others > 0:
        rationale.append(f"{others} additional match{'es' if others > 1 else ''} found")

    confidence = compute_confidence(best, scored)
    if confidence < config.CONFIDENCE_REFINE_THRESHOLD:
        rationale.append("Low confidence. Consider refining your search.")

    return MatchResult(best=best.entry, matches=matches, confidence=confidence, rationale=rationale)


def search_materials(provider: Provider, query: str, limit: int = 10) -> List[MaterialMatch]:
    """Top matches for a search box; bounded by the match list (at most 5)."""
    return match_material(provider, query).matches[:limit]
