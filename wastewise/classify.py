from __future__ import annotations

"""
Concept classification pipeline.

normalize -> strip packaging phrase -> retrieve -> follow-up re-score ->
vision boost -> pick winner -> confidence -> category / why / next steps.

Every edge case (empty query, empty or unavailable catalog, nothing above
the relevance floor) comes back as a zero-confidence result, never as an
exception.
"""

from typing import List, Optional, Sequence

from loguru import logger

from . import config
from .catalog_store import CatalogStore, get_concepts
from .confidence import compute_confidence
from .config import Category, ClassificationResult, Concept, FollowupQuestion, TopMatch
from .normalize import normalize_query, strip_packaging_hint
from .pipeline_types import ScoredCandidate
from .rerank import apply_followup_answer, apply_vision_boost
from .retrieval import retrieve_candidates


def _empty_result(why: List[str], do_next: List[str], warnings: List[str]) -> ClassificationResult:
    # trash is the conservative placeholder when nothing was recognised
    return ClassificationResult(
        category=Category.TRASH,
        confidence=0.0,
        concept_id=None,
        concept_name=None,
        top_matches=[],
        why=why,
        do_next=do_next,
        warnings=warnings,
    )


def empty_query_result() -> ClassificationResult:
    return _empty_result(
        why=["Empty query provided"],
        do_next=["Enter or describe the item you want to dispose of"],
        warnings=["No input"],
    )


def catalog_unavailable_result() -> ClassificationResult:
    return _empty_result(
        why=["Concept library not loaded"],
        do_next=["Try again or use search"],
        warnings=["No concepts available"],
    )


def no_match_result(query: str) -> ClassificationResult:
    return _empty_result(
        why=[f'No concept matched "{query}"'],
        do_next=["Try different words", "Check spelling", "Describe the material"],
        warnings=["No match"],
    )


def _build_why(best: ScoredCandidate, n_candidates: int) -> List[str]:
    why = [
        f'Best match: "{best.entry.name}" ({best.match_type.value}, score: {best.score})'
    ]
    others = n_candidates - 1
    if others > 0:
        why.append(f"{others} other concept{'s' if others > 1 else ''} matched")
    return why


def _pick_followup(best: ScoredCandidate, confidence: float) -> Optional[FollowupQuestion]:
    if confidence >= config.CONFIDENCE_FOLLOWUP_THRESHOLD:
        return None
    questions = best.entry.followup_questions
    return questions[0] if questions else None


def run_classification(
    query: str,
    concepts: Sequence[Concept],
    labels: Optional[Sequence[str]] = None,
    followup_answer: Optional[str] = None,
) -> ClassificationResult:
    """
    Classify one item description against an already-loaded concept list.

    ``labels`` are image-recognition words used for a small boost;
    ``followup_answer`` answers a question emitted by a previous call.
    """
    raw_query = normalize_query(query)
    stripped = strip_packaging_hint(raw_query)

    if not stripped:
        return empty_query_result()

    if not concepts:
        logger.warning("Classification requested with an empty concept catalog")
        return catalog_unavailable_result()

    candidates = retrieve_candidates(concepts, stripped, limit=config.CANDIDATE_LIMIT)
    candidates = apply_followup_answer(candidates, followup_answer)
    candidates = apply_vision_boost(candidates, labels)

    if not candidates:
        logger.info("No concept matched {!r}", stripped)
        return no_match_result(stripped)

    best = candidates[0]
    confidence = compute_confidence(best, candidates)
    category = best.entry.category

    top_matches = [
        TopMatch(concept_id=c.entry.id, score=c.score, match_type=c.match_type.value)
        for c in candidates[: config.TOP_MATCHES_LIMIT]
    ]

    do_next: List[str] = []
    if confidence < config.CONFIDENCE_REFINE_THRESHOLD:
        do_next.append("Consider refining your search or answering the follow-up question")
    do_next.append(f"Dispose in: {category.value}")

    warnings: List[str] = []
    if confidence < config.CONFIDENCE_FOLLOWUP_THRESHOLD:
        warnings.append("Low confidence, check the result or answer the question below")

    logger.info(
        "Classified {!r} as {} via {} ({}, confidence={:.2f})",
        stripped, best.entry.id, best.match_type.value, category.value, confidence,
    )

    return ClassificationResult(
        category=category,
        confidence=confidence,
        concept_id=best.entry.id,
        concept_name=best.entry.name,
        top_matches=top_matches,
        why=_build_why(best, len(candidates)),
        do_next=do_next,
        followup_question=_pick_followup(best, confidence),
        warnings=warnings or None,
    )


def classify(
    query: str,
    store: CatalogStore,
    labels: Optional[Sequence[str]] = None,
    followup_answer: Optional[str] = None,
) -> ClassificationResult:
    """
    Store-aware wrapper around ``run_classification``.

    A concept catalog that cannot be loaded is reported as a zero-confidence
    result so callers can render a "try again" state.
    """
    if not strip_packaging_hint(normalize_query(query)):
        return empty_query_result()

    try:
        concepts = get_concepts(store)
    except (OSError, ValueError) as e:
        logger.warning("Concept catalog unavailable: {}", e)
        return catalog_unavailable_result()

    return run_classification(query, concepts, labels=labels, followup_answer=followup_answer)
