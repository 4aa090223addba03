import pytest

from wastewise.config import Concept, Material


def make_concept(id, name, aliases=None, category="trash", examples=None, attributes=None, followup=None):
    data = {
        "id": id,
        "name": name,
        "aliases": aliases or [name.lower()],
        "defaultCategory": category,
        "examples": examples or [],
        "followup": followup or [],
    }
    if attributes is not None:
        data["attributes"] = attributes
    return Concept.model_validate(data)


def make_material(id, name, aliases=None, category="recycle", tags=None):
    return Material(id=id, name=name, aliases=aliases or [], category=category, tags=tags or [])


@pytest.fixture
def glass_concepts():
    """Two near-identical concepts that tie on most queries."""
    jar = make_concept(
        "jar",
        "Glass jar",
        aliases=["glass jar"],
        category="recycle",
        examples=["mason jar", "pickle jar", "jam jar", "honey jar", "salsa jar"],
        followup=[
            {"id": "lid", "question": "Does it still have a metal lid?", "options": ["Yes", "No"]},
            {"id": "rinsed", "question": "Is it rinsed?", "options": ["Yes", "No"]},
        ],
    )
    jug = make_concept("jug", "Glass jug", aliases=["glass jug"], category="trash")
    return [jar, jug]
