"""Typed containers shared across pipeline modules."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Protocol, Sequence

from .config import FollowupQuestion, Material


class MatchType(str, Enum):
    """Which scoring strategy produced a candidate's winning score."""

    EXACT_NAME = "exact-name"
    EXACT_ALIAS = "exact-alias"
    PARTIAL = "partial"
    TOKEN = "token"
    ATTRIBUTE = "attribute"
    TRIGRAM = "trigram"


class CatalogEntry(Protocol):
    """Read interface shared by concepts and jurisdiction materials."""

    id: str
    name: str
    aliases: Sequence[str]
    examples: Sequence[str]

    @property
    def attribute_tags(self) -> Sequence[str]: ...

    @property
    def followup_questions(self) -> Sequence[FollowupQuestion]: ...


@dataclass(frozen=True)
class ScoredCandidate:
    """A catalog entry with its best score and the strategy behind it."""

    entry: CatalogEntry
    score: float
    match_type: MatchType

    def with_score(self, score: float) -> "ScoredCandidate":
        return replace(self, score=score)


@dataclass(frozen=True)
class MaterialMatch:
    material: Material
    score: float


@dataclass(frozen=True)
class MatchResult:
    """Outcome of matching one query against a single jurisdiction."""

    best: Optional[Material]
    matches: List[MaterialMatch] = field(default_factory=list)
    confidence: float = 0.0
    rationale: List[str] = field(default_factory=list)
