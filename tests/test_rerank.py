from wastewise.pipeline_types import MatchType, ScoredCandidate
from wastewise.rerank import apply_followup_answer, apply_vision_boost, entry_tokens, label_tokens
from wastewise.retrieval import retrieve_candidates, sort_candidates

from conftest import make_concept


def _cand(entry, score):
    return ScoredCandidate(entry=entry, score=score, match_type=MatchType.TOKEN)


def test_sort_candidates_is_stable_on_ties():
    a, b, c = (make_concept(i, i.title()) for i in ("a", "b", "c"))
    ranked = sort_candidates([_cand(a, 0.4), _cand(b, 0.9), _cand(c, 0.4)])
    assert [r.entry.id for r in ranked] == ["b", "a", "c"]


def test_retrieve_candidates_applies_floor_and_limit(glass_concepts):
    ranked = retrieve_candidates(glass_concepts, "glass", limit=1)
    assert len(ranked) == 1
    assert retrieve_candidates(glass_concepts, "battery") == []


def test_followup_answer_promotes_matching_entry(glass_concepts):
    jar, jug = glass_concepts
    ranked = apply_followup_answer([_cand(jar, 0.43), _cand(jug, 0.43)], "Jug")
    assert ranked[0].entry.id == "jug"
    assert ranked[0].score == 0.63
    assert ranked[1].score == 0.43


def test_followup_answer_blank_is_noop(glass_concepts):
    jar, jug = glass_concepts
    cands = [_cand(jar, 0.5), _cand(jug, 0.4)]
    assert apply_followup_answer(cands, "  ") == cands
    assert apply_followup_answer(cands, None) == cands


def test_followup_bonus_is_capped(glass_concepts):
    jar, _ = glass_concepts
    ranked = apply_followup_answer([_cand(jar, 0.9)], "jar")
    assert ranked[0].score == 1.0


def test_vision_boost_counts_overlapping_label_tokens(glass_concepts):
    jar, jug = glass_concepts
    ranked = apply_vision_boost([_cand(jug, 0.43), _cand(jar, 0.43)], ["jar"])
    assert ranked[0].entry.id == "jar"
    assert ranked[0].score == 0.48


def test_vision_boost_is_capped(glass_concepts):
    jar, _ = glass_concepts
    ranked = apply_vision_boost([_cand(jar, 0.98)], ["mason jar", "pickle", "honey"])
    assert ranked[0].score == 1.0


def test_vision_boost_without_labels_only_sorts(glass_concepts):
    jar, jug = glass_concepts
    ranked = apply_vision_boost([_cand(jar, 0.2), _cand(jug, 0.6)], None)
    assert [r.entry.id for r in ranked] == ["jug", "jar"]
    assert [r.score for r in ranked] == [0.6, 0.2]


def test_label_and_entry_tokens(glass_concepts):
    jar, _ = glass_concepts
    assert label_tokens(["Mason Jars", "the honey"]) == {"mason", "jar", "honey"}
    # single-s words lose their final s ("glass" -> "glas")
    assert {"glas", "jar", "mason", "pickle"} <= entry_tokens(jar)
