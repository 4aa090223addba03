from __future__ import annotations

from typing import Optional, Sequence

from . import config
from .pipeline_types import MatchType, ScoredCandidate
from .scorer import round_score


def compute_confidence(best: ScoredCandidate, ranked: Sequence[ScoredCandidate]) -> float:
    """
    Turn the winning raw score into a confidence.

    A clear gap to the runner-up sharpens it; a near tie on a weak winner
    dampens it. Exact name / alias wins override both.
    """
    confidence = best.score

    if len(ranked) >= 2:
        gap = best.score - ranked[1].score
        if gap > config.CLEAR_GAP:
            confidence = min(1.0, confidence + config.CLEAR_GAP_BONUS)
        elif gap < config.AMBIGUOUS_GAP and best.score < config.AMBIGUOUS_MAX_SCORE:
            confidence = max(0.0, confidence - config.AMBIGUOUS_PENALTY)

    if best.match_type is MatchType.EXACT_NAME:
        confidence = 1.0
    elif best.match_type is MatchType.EXACT_ALIAS:
        confidence = max(confidence, config.EXACT_ALIAS_SCORE)

    return round_score(confidence)


def blend_confidence(
    deterministic: float,
    vision: Optional[float] = None,
    resolve: Optional[float] = None,
) -> float:
    """
    Weighted mean of the text-matching confidence and any outside signals
    (vision model, resolver). Without outside signals the text confidence is
    returned as is.
    """
    if vision is None and resolve is None:
        return deterministic

    weights = config.BLEND_WEIGHTS
    total = deterministic * weights["deterministic"]
    weight_sum = weights["deterministic"]

    if vision is not None:
        total += vision * weights["vision"]
        weight_sum += weights["vision"]
    if resolve is not None:
        total += resolve * weights["resolve"]
        weight_sum += weights["resolve"]

    return round_score(total / weight_sum)


def confidence_band(confidence: float) -> str:
    """Coarse label used in logs and the eval report."""
    if confidence >= config.HIGH_CONFIDENCE_THRESHOLD:
        return "high"
    if confidence >= config.CONFIDENCE_THRESHOLD:
        return "medium"
    return "low"
