from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------
# Paths
# ---------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[1]

DATA_DIR = Path(os.getenv("WASTEWISE_DATA_DIR", str(PROJECT_ROOT / "data")))
CONCEPTS_DIR = DATA_DIR / "concepts"
PROVIDERS_DIR = DATA_DIR / "providers"


# ---------------------------
# Catalog ids
# ---------------------------

CONCEPT_CATALOG_ID = "concepts"
DEFAULT_PROVIDER_ID = os.getenv("WASTEWISE_DEFAULT_PROVIDER", "general")


# ---------------------------
# Scoring weights (per strategy)
# ---------------------------

EXACT_NAME_SCORE = 1.00
EXACT_ALIAS_SCORE = 0.95
PARTIAL_BASE_SCORE = 0.70
PARTIAL_LENGTH_WEIGHT = 0.20
TOKEN_OVERLAP_WEIGHT = 0.85
TOKEN_SUBSTRING_MIN_LEN = 3
ATTRIBUTE_SCORE = 0.50
ATTRIBUTE_MIN_LEN = 3
ATTRIBUTE_CONTAINS_QUERY_MIN_LEN = 4
EXAMPLE_EXACT_SCORE = 0.90
EXAMPLE_TRIGRAM_WEIGHT = 0.75
NAME_TRIGRAM_WEIGHT = 0.70


# ---------------------------
# Ranking & confidence
# ---------------------------

MIN_SCORE_THRESHOLD = 0.15
CANDIDATE_LIMIT = 100
TOP_MATCHES_LIMIT = 10
MATERIAL_MATCHES_LIMIT = 5
SEARCH_RESULTS_LIMIT = 8

CLEAR_GAP = 0.30            # gap above this sharpens confidence
CLEAR_GAP_BONUS = 0.10
AMBIGUOUS_GAP = 0.05        # gap below this (with a weak winner) dampens it
AMBIGUOUS_MAX_SCORE = 0.80
AMBIGUOUS_PENALTY = 0.15

CONFIDENCE_FOLLOWUP_THRESHOLD = 0.60
CONFIDENCE_REFINE_THRESHOLD = 0.50
CONFIDENCE_THRESHOLD = 0.40
HIGH_CONFIDENCE_THRESHOLD = 0.75

# blend weights when vision / resolver confidences are available
BLEND_WEIGHTS: Dict[str, float] = {
    "deterministic": 0.50,
    "vision": 0.25,
    "resolve": 0.25,
}


# ---------------------------
# Re-scoring
# ---------------------------

FOLLOWUP_ANSWER_BONUS = 0.20
VISION_LABEL_BONUS = 0.05


# ---------------------------
# Text processing
# ---------------------------

MAX_INPUT_CHARS = 500  # item names, not documents


# ---------------------------
# Vision label service (HTTP hardening)
# ---------------------------

VISION_API_URL = os.getenv("WASTEWISE_VISION_API_URL", "http://localhost:8088/labels")
HTTP_CONNECT_TIMEOUT = 3.0
HTTP_READ_TIMEOUT = 10.0
HTTP_MAX_IMAGE_BYTES = 5_000_000
HTTP_USER_AGENT = "wastewise/1.0"
VISION_MAX_LABELS = 20


# ---------------------------
# Logging / observability
# ---------------------------

LOG_DIR = PROJECT_ROOT / "logs"
LOG_LEVEL = os.getenv("WASTEWISE_LOG_LEVEL", "INFO")


# ---------------------------
# Pydantic models shared around the app
# ---------------------------

class Category(str, Enum):
    """Disposal categories the concept engine can commit to."""

    RECYCLE = "recycle"
    COMPOST = "compost"
    TRASH = "trash"
    DROPOFF = "dropoff"
    HAZARDOUS = "hazardous"


class MaterialCategory(str, Enum):
    """Jurisdiction lists may also say they are unsure."""

    RECYCLE = "recycle"
    COMPOST = "compost"
    TRASH = "trash"
    DROPOFF = "dropoff"
    HAZARDOUS = "hazardous"
    UNKNOWN = "unknown"


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class FollowupQuestion(_CamelModel):
    id: str = Field(min_length=1)
    question: str = Field(min_length=1)
    options: Optional[List[str]] = None


class ConceptAttributes(_CamelModel):
    likely_materials: List[str] = Field(default_factory=list, alias="likelyMaterials")
    likely_forms: List[str] = Field(default_factory=list, alias="likelyForms")
    common_contaminants: List[str] = Field(default_factory=list, alias="commonContaminants")
    mixed_material: Optional[bool] = Field(default=None, alias="mixedMaterial")


class Concept(_CamelModel):
    """
    Jurisdiction-agnostic item definition from the concept ontology.
    """

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    aliases: List[str] = Field(min_length=1)
    examples: List[str] = Field(default_factory=list)
    default_category: Category = Field(alias="defaultCategory")
    attributes: Optional[ConceptAttributes] = None
    followup: List[FollowupQuestion] = Field(default_factory=list)

    @property
    def category(self) -> Category:
        return self.default_category

    @property
    def attribute_tags(self) -> List[str]:
        if self.attributes is None:
            return []
        return [
            *self.attributes.likely_materials,
            *self.attributes.likely_forms,
            *self.attributes.common_contaminants,
        ]

    @property
    def followup_questions(self) -> List[FollowupQuestion]:
        return self.followup


class Material(_CamelModel):
    """
    Jurisdiction-specific material with local instructions.
    """

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    aliases: List[str] = Field(default_factory=list)
    category: MaterialCategory
    instructions: List[str] = Field(default_factory=list)
    notes: List[str] = Field(default_factory=list)
    common_mistakes: List[str] = Field(default_factory=list, alias="commonMistakes")
    tags: List[str] = Field(default_factory=list)
    examples: List[str] = Field(default_factory=list)

    @property
    def attribute_tags(self) -> List[str]:
        return self.tags

    @property
    def followup_questions(self) -> List[FollowupQuestion]:
        return []


class ProviderCoverage(_CamelModel):
    country: str = Field(min_length=1)
    region: Optional[str] = None
    city: Optional[str] = None
    zips: List[str] = Field(default_factory=list)
    aliases: List[str] = Field(default_factory=list)


class ProviderSource(_CamelModel):
    name: str = Field(min_length=1)
    url: Optional[str] = None
    generated_at: str = Field(min_length=1, alias="generatedAt")
    notes: Optional[str] = None
    license: Optional[str] = None


class Provider(_CamelModel):
    """
    One jurisdiction's material catalog.
    """

    id: str = Field(min_length=1)
    display_name: str = Field(min_length=1, alias="displayName")
    coverage: ProviderCoverage
    source: ProviderSource
    materials: List[Material] = Field(min_length=1)
    rules_summary: Optional[Dict[str, object]] = Field(default=None, alias="rulesSummary")


class TopMatch(_CamelModel):
    concept_id: str = Field(alias="conceptId")
    score: float = Field(ge=0.0, le=1.0)
    match_type: Optional[str] = Field(default=None, alias="matchType")


class ClassificationResult(_CamelModel):
    """
    Response body for POST /classify and the return value of the pipeline.
    """

    category: Category
    confidence: float = Field(ge=0.0, le=1.0)
    concept_id: Optional[str] = Field(default=None, alias="conceptId")
    concept_name: Optional[str] = Field(default=None, alias="conceptName")
    top_matches: List[TopMatch] = Field(default_factory=list, alias="topMatches")
    why: List[str] = Field(default_factory=list)
    do_next: List[str] = Field(default_factory=list, alias="doNext")
    followup_question: Optional[FollowupQuestion] = Field(default=None, alias="followupQuestion")
    warnings: Optional[List[str]] = None


class ClassifyRequest(_CamelModel):
    query: str
    labels: Optional[List[str]] = None
    followup_answer: Optional[str] = Field(default=None, alias="followupAnswer")
    provider: Optional[str] = None
    vision_confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0, alias="visionConfidence")


class ClassifyResponse(ClassificationResult):
    """
    ClassificationResult plus the jurisdiction material it was bridged to.
    """

    material: Optional[Material] = None
    blended_confidence: Optional[float] = Field(default=None, alias="blendedConfidence")


class SearchResult(_CamelModel):
    material_id: str = Field(alias="materialId")
    name: str
    category: MaterialCategory
    score: float = Field(ge=0.0, le=1.0)


class ProviderSummary(_CamelModel):
    id: str
    display_name: str = Field(alias="displayName")
    coverage: ProviderCoverage


class HealthResponse(BaseModel):
    """
    Response body for GET /health.
    """

    status: str
