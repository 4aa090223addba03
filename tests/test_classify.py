import pytest

from wastewise.catalog_build import load_concepts
from wastewise.catalog_store import CatalogStore
from wastewise.classify import classify, run_classification
from wastewise.config import Category


@pytest.fixture(scope="module")
def concepts():
    return load_concepts()


@pytest.mark.parametrize(
    "query, concept_id, category",
    [
        ("piece of paper", "paper_sheet", Category.RECYCLE),
        ("receipt", "receipt_thermal", Category.TRASH),
        ("newspaper", "newspaper", Category.RECYCLE),
        ("candy wrapper", "candy_wrapper", Category.TRASH),
        ("plastic bag of candy", "candy_wrapper", Category.TRASH),
        ("keys", "keys", Category.RECYCLE),
        ("drinking glass", "drinking_glass", Category.TRASH),
        ("wine bottle", "glass_bottle", Category.RECYCLE),
        ("Batteries", "batteries", Category.HAZARDOUS),
        ("ceramic mug", "ceramic_mug", Category.TRASH),
        ("broken ceramic", "broken_ceramic", Category.TRASH),
        ("plastic bottle", "plastic_bottle", Category.RECYCLE),
        ("plastic bag", "plastic_bags", Category.TRASH),
        ("pizza box", "pizza_box_clean", Category.RECYCLE),
    ],
)
def test_known_items(concepts, query, concept_id, category):
    result = run_classification(query, concepts)
    assert result.concept_id == concept_id
    assert result.category is category
    assert result.confidence >= 0.75


def test_paper_is_not_confused_with_newspaper(concepts):
    result = run_classification("piece of paper", concepts)
    assert result.confidence == 1.0
    assert result.top_matches[0].concept_id == "paper_sheet"
    assert "newspaper" in [m.concept_id for m in result.top_matches[1:]]


def test_plastic_bag_is_trash_with_high_confidence(concepts):
    result = run_classification("plastic bag", concepts)
    assert result.concept_id == "plastic_bags"
    assert result.category is Category.TRASH
    assert result.confidence > 0.8


def test_balloon_goes_to_trash(concepts):
    result = run_classification("balloon", concepts)
    assert result.concept_id in {"balloon_latex", "balloon_foil"}
    assert result.category is Category.TRASH


def test_nonsense_item_has_low_confidence(concepts):
    result = run_classification("unicorn horn", concepts)
    assert result.confidence < 0.4
    assert result.category is Category.TRASH


@pytest.mark.parametrize("query", ["", "   ", "\n\t"])
def test_blank_query_is_zero_confidence(concepts, query):
    result = run_classification(query, concepts)
    assert result.confidence == 0.0
    assert result.concept_id is None
    assert result.top_matches == []
    assert result.warnings == ["No input"]


def test_empty_catalog_is_reported():
    result = run_classification("plastic bottle", [])
    assert result.confidence == 0.0
    assert result.why == ["Concept library not loaded"]


def test_result_shape(concepts):
    result = run_classification("glass jar", concepts)
    assert 0.0 <= result.confidence <= 1.0
    assert len(result.top_matches) <= 10
    scores = [m.score for m in result.top_matches]
    assert scores == sorted(scores, reverse=True)
    assert result.why[0].startswith('Best match: "Glass jar"')
    assert result.do_next[-1] == "Dispose in: recycle"


def test_classification_is_deterministic(concepts):
    a = run_classification("greasy pizza box", concepts, labels=["cardboard"])
    b = run_classification("greasy pizza box", concepts, labels=["cardboard"])
    assert a.model_dump_json() == b.model_dump_json()


def test_ambiguous_query_asks_followup(glass_concepts):
    result = run_classification("glass cup", glass_concepts)
    assert result.concept_id == "jar"
    assert result.confidence < 0.6
    assert result.followup_question is not None
    # only the first of the winner's questions is attached
    assert result.followup_question.id == "lid"
    assert len(glass_concepts[0].followup_questions) == 2
    assert result.warnings
    assert result.do_next[0].startswith("Consider refining")


def test_followup_answer_changes_winner(glass_concepts):
    result = run_classification("glass cup", glass_concepts, followup_answer="jug")
    assert result.concept_id == "jug"
    assert result.category is Category.TRASH


def test_vision_labels_break_ties(glass_concepts):
    result = run_classification("glass cup", glass_concepts, labels=["jar"])
    assert result.concept_id == "jar"
    assert result.top_matches[0].score > result.top_matches[1].score


def test_vision_boost_can_overtake_followup_answer(glass_concepts):
    # the vision pass runs after the follow-up pass and both re-sort
    labels = ["mason jar", "pickle", "honey", "salsa", "jam"]
    result = run_classification("glass cup", glass_concepts, labels=labels, followup_answer="jug")
    assert result.concept_id == "jar"


def test_classify_uses_store():
    store = CatalogStore()
    result = classify("soda can", store)
    assert result.concept_id == "aluminum_cans"
    assert result.confidence >= 0.95


def test_classify_reports_broken_catalog(monkeypatch):
    def broken(*args, **kwargs):
        raise ValueError("bad json")

    monkeypatch.setattr("wastewise.classify.get_concepts", broken)
    result = classify("soda can", CatalogStore())
    assert result.confidence == 0.0
    assert result.warnings == ["No concepts available"]
