from __future__ import annotations
"""
Bridge from concept classifications to jurisdiction materials.

When the local provider has a material for the winning concept we hand back
that material (it carries local instructions, notes and common mistakes).
Otherwise a minimal material is synthesised from per-category default
instructions so the UI always has something to render.
"""

from typing import List, Optional

from loguru import logger

from .config import ClassificationResult, Material, MaterialCategory, Provider, SearchResult
from .constants import CONCEPT_TO_MATERIAL_ID, DEFAULT_INSTRUCTIONS
from .pipeline_types import MaterialMatch


def material_for_concept(provider: Provider, concept_id: str) -> Optional[Material]:
    """Return the provider's material mapped to ``concept_id``, if any."""
    material_id = CONCEPT_TO_MATERIAL_ID.get(concept_id)
    if not material_id:
        return None
    for material in provider.materials:
        if material.id == material_id:
            return material
    logger.debug("Provider {} has no material {} for concept {}", provider.id, material_id, concept_id)
    return None


def synthetic_material_from_result(result: ClassificationResult, query: str) -> Material:
    """Minimal material built from the classification itself."""
    category = result.category.value
    instructions = DEFAULT_INSTRUCTIONS.get(category, DEFAULT_INSTRUCTIONS["trash"])
    return Material(
        id=f"concept-{result.concept_id or 'unknown'}",
        name=result.concept_name or query or "Item",
        aliases=[],
        category=MaterialCategory(category),
        instructions=list(instructions),
        notes=list(result.why),
        common_mistakes=list(result.warnings or []),
        tags=[],
        examples=[],
    )


def material_from_classification(
    provider: Provider,
    result: ClassificationResult,
    query: str,
) -> Material:
    """Prefer the provider's own material; fall back to a synthetic one."""
    if result.concept_id:
        material = material_for_concept(provider, result.concept_id)
        if material is not None:
            return material
    return synthetic_material_from_result(result, query)


def to_search_results(matches: List[MaterialMatch], limit: int) -> List[SearchResult]:
    """Map material matches into the /search response shape."""
    return [
        SearchResult(
            material_id=m.material.id,
            name=m.material.name,
            category=m.material.category,
            score=m.score,
        )
        for m in matches[:limit]
    ]
