from wastewise.confidence import blend_confidence, compute_confidence, confidence_band
from wastewise.pipeline_types import MatchType, ScoredCandidate

from conftest import make_concept


def _cand(score, match_type=MatchType.PARTIAL, name="Thing"):
    return ScoredCandidate(entry=make_concept(name.lower(), name), score=score, match_type=match_type)


def test_single_candidate_keeps_raw_score():
    best = _cand(0.72)
    assert compute_confidence(best, [best]) == 0.72


def test_clear_gap_adds_bonus():
    best, runner = _cand(0.70), _cand(0.30)
    assert compute_confidence(best, [best, runner]) == 0.8


def test_clear_gap_bonus_is_capped():
    best, runner = _cand(0.97, MatchType.PARTIAL), _cand(0.2)
    assert compute_confidence(best, [best, runner]) == 1.0


def test_ambiguous_weak_winner_is_penalised():
    best, runner = _cand(0.60), _cand(0.58)
    assert compute_confidence(best, [best, runner]) <= 0.45


def test_ambiguous_strong_winner_is_not_penalised():
    best, runner = _cand(0.85), _cand(0.84)
    assert compute_confidence(best, [best, runner]) == 0.85


def test_exact_name_forces_full_confidence():
    best, runner = _cand(1.0, MatchType.EXACT_NAME), _cand(0.99)
    assert compute_confidence(best, [best, runner]) == 1.0


def test_exact_alias_floor():
    best, runner = _cand(0.95, MatchType.EXACT_ALIAS), _cand(0.95, MatchType.EXACT_ALIAS)
    assert compute_confidence(best, [best, runner]) == 0.95


def test_blend_without_signals_returns_input():
    assert blend_confidence(0.42) == 0.42


def test_blend_weights():
    assert blend_confidence(0.8, vision=0.4) == 0.67
    assert blend_confidence(0.8, vision=0.4, resolve=0.0) == 0.5
    assert blend_confidence(1.0, resolve=1.0) == 1.0


def test_confidence_band():
    assert confidence_band(0.9) == "high"
    assert confidence_band(0.5) == "medium"
    assert confidence_band(0.1) == "low"
