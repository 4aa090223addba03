# wastewise/rerank.py
from __future__ import annotations

"""
Second-pass score adjustments applied after retrieval.

Two independent passes, each followed by its own re-sort:

1. follow-up answer: entries whose name/alias contains the user's answer
   get a fixed bonus;
2. vision labels: entries whose vocabulary overlaps the image-recognition
   labels get a small bonus per overlapping label token.

They must stay separate. Running the vision pass after the follow-up pass
can let a label-boosted candidate overtake the one the answer promoted.
"""

from typing import Iterable, List, Optional, Sequence, Set

from loguru import logger

from . import config
from .normalize import tokenize
from .pipeline_types import CatalogEntry, ScoredCandidate
from .retrieval import sort_candidates
from .scorer import round_score


# ---------------------------------------------------------------------------
# Follow-up answer
# ---------------------------------------------------------------------------

def _answer_matches(entry: CatalogEntry, answer: str) -> bool:
    if answer in entry.name.lower():
        return True
    return any(answer in alias.lower() for alias in entry.aliases)


def apply_followup_answer(
    candidates: Sequence[ScoredCandidate],
    followup_answer: Optional[str],
) -> List[ScoredCandidate]:
    """
    Add ``FOLLOWUP_ANSWER_BONUS`` (capped at 1.0) to every candidate whose
    name or alias contains the answer, then re-sort. A blank answer leaves
    the list untouched.
    """
    answer = (followup_answer or "").strip().lower()
    if not answer:
        return list(candidates)

    adjusted: List[ScoredCandidate] = []
    hits = 0
    for cand in candidates:
        if _answer_matches(cand.entry, answer):
            hits += 1
            cand = cand.with_score(min(1.0, round_score(cand.score + config.FOLLOWUP_ANSWER_BONUS)))
        adjusted.append(cand)

    logger.debug("Follow-up answer {!r} promoted {} candidates", answer, hits)
    return sort_candidates(adjusted)


# ---------------------------------------------------------------------------
# Vision labels
# ---------------------------------------------------------------------------

def label_tokens(labels: Iterable[str]) -> Set[str]:
    tokens: Set[str] = set()
    for label in labels:
        tokens.update(tokenize(label))
    return tokens


def entry_tokens(entry: CatalogEntry) -> Set[str]:
    tokens: Set[str] = set()
    for text in (entry.name, *entry.aliases, *entry.examples):
        tokens.update(tokenize(text))
    return tokens


def _label_hits(labels: Set[str], vocab: Set[str]) -> int:
    hits = 0
    for lt in labels:
        if lt in vocab or any(ct in lt or lt in ct for ct in vocab):
            hits += 1
    return hits


def apply_vision_boost(
    candidates: Sequence[ScoredCandidate],
    labels: Optional[Sequence[str]],
) -> List[ScoredCandidate]:
    """
    Add ``VISION_LABEL_BONUS`` per overlapping label token (capped at 1.0)
    and re-sort. Always returns a freshly sorted list, even with no labels.
    """
    tokens = label_tokens(labels or [])
    if not tokens:
        return sort_candidates(candidates)

    boosted: List[ScoredCandidate] = []
    for cand in candidates:
        hits = _label_hits(tokens, entry_tokens(cand.entry))
        if hits:
            cand = cand.with_score(min(1.0, round_score(cand.score + hits * config.VISION_LABEL_BONUS)))
        boosted.append(cand)

    return sort_candidates(boosted)
