from __future__ import annotations

"""
Text normalisation helpers shared by the scorer and both pipelines.

The goal is to have a single, well-defined place that turns item names,
aliases and user queries into comparable views, so catalog entries and
queries always go through the same rules.

Public helpers:

* tokenize(text) -> List[str]
    Stop-word filtered, naively depluralised word tokens.

* generate_trigrams(text) -> Set[str]
    Character trigrams over lowercase alphanumerics.

* trigram_similarity(a, b) -> float
    Jaccard similarity of the two trigram sets.

* normalize_for_comparison(text) -> str
    Lowercase, punctuation-free view used for equality / containment.

* normalize_query(text) -> str
    Trim, lowercase and collapse whitespace.

* strip_packaging_hint(text) -> str
    Drop a leading "bag of" / "piece of" style phrase.
"""

import re
from typing import List, Set

from .constants import PACKAGING_PREFIX_PATTERNS, PLURAL_RULES, STOP_WORDS
from .utils.text_clean import clean_query_text

_TOKEN_STRIP_RE = re.compile(r"[^a-z0-9\s-]")
_TOKEN_SPLIT_RE = re.compile(r"[\s-]+")
_COMPARE_STRIP_RE = re.compile(r"[^a-z0-9\s]")
_TRIGRAM_STRIP_RE = re.compile(r"[^a-z0-9]")

# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


def depluralize(word: str) -> str:
    """Strip a plural suffix from words longer than three characters."""
    if len(word) <= 3:
        return word
    for pattern, replacement in PLURAL_RULES:
        if pattern.search(word):
            return pattern.sub(replacement, word, count=1)
    return word


def tokenize(text: str | None) -> List[str]:
    """Tokenise text for overlap scoring.

    "Plastic Bottles" -> ["plastic", "bottle"]; hyphens split words, so
    "e-waste" -> ["e", "waste"].
    """
    if not text:
        return []
    cleaned = _TOKEN_STRIP_RE.sub("", text.lower())
    return [
        depluralize(w)
        for w in _TOKEN_SPLIT_RE.split(cleaned)
        if w and w not in STOP_WORDS
    ]


# ---------------------------------------------------------------------------
# Trigrams
# ---------------------------------------------------------------------------


def generate_trigrams(text: str | None) -> Set[str]:
    normalized = _TRIGRAM_STRIP_RE.sub("", (text or "").lower())
    return {normalized[i : i + 3] for i in range(len(normalized) - 2)}


def trigram_similarity(a: str | None, b: str | None) -> float:
    trigrams_a = generate_trigrams(a)
    trigrams_b = generate_trigrams(b)
    if not trigrams_a or not trigrams_b:
        return 0.0
    intersection = len(trigrams_a & trigrams_b)
    union = len(trigrams_a) + len(trigrams_b) - intersection
    return intersection / union if union else 0.0


# ---------------------------------------------------------------------------
# Whole-string views
# ---------------------------------------------------------------------------


def normalize_for_comparison(text: str | None) -> str:
    return _COMPARE_STRIP_RE.sub("", (text or "").lower()).strip()


def normalize_query(text: str | None) -> str:
    return clean_query_text(text).lower()


def strip_packaging_hint(text: str) -> str:
    """Remove one leading packaging phrase ("a bag of chips" -> "chips").

    Falls back to the original text if nothing would be left.
    """
    for pattern in PACKAGING_PREFIX_PATTERNS:
        if pattern.search(text):
            stripped = pattern.sub("", text, count=1).strip()
            return stripped or text
    return text
