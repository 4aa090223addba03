from __future__ import annotations

"""
FastAPI application for the disposal classifier.

- /classify runs the concept pipeline and, when a provider is named,
  bridges the result to that jurisdiction's material
- /scan forwards an image to the vision service and classifies with its labels
- /search matches directly against one provider's materials
- Blank queries are answered with a zero-confidence result, not a 4xx
"""

from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.concurrency import run_in_threadpool

from .catalog_build import list_provider_ids, summarize_provider
from .catalog_store import CatalogStore, get_concepts, get_provider
from .classify import classify
from .confidence import blend_confidence
from .config import (
    DEFAULT_PROVIDER_ID,
    LOG_DIR,
    LOG_LEVEL,
    SEARCH_RESULTS_LIMIT,
    ClassificationResult,
    ClassifyRequest,
    ClassifyResponse,
    HealthResponse,
    Provider,
    ProviderSummary,
    SearchResult,
)
from .mapping import material_from_classification, to_search_results
from .matching import search_materials
from .utils.text_clean import clean_query_text
from .vision_client import fetch_labels


# -----------------------
# FastAPI app + startup
# -----------------------

app = FastAPI(title="wastewise")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.store = CatalogStore()

# file sink id; startup may run more than once per process (reloads, test lifespans)
_log_sink_id: Optional[int] = None


def get_store(request: Request) -> CatalogStore:
    return request.app.state.store


@app.on_event("startup")
def startup_event() -> None:
    global _log_sink_id
    if _log_sink_id is None:
        _log_sink_id = logger.add(LOG_DIR / "api.log", level=LOG_LEVEL, rotation="10 MB", retention=5)
    logger.info("Starting app warmup...")
    store: CatalogStore = app.state.store
    try:
        concepts = get_concepts(store)
        logger.info("Concept catalog ready with {} concepts", len(concepts))
        get_provider(store, DEFAULT_PROVIDER_ID)
    except (OSError, ValueError) as e:
        # classify() reports an unavailable catalog per request
        logger.warning("Warmup partial failure: {}", e)
    logger.info("Warmup complete.")


@app.on_event("shutdown")
def shutdown_event() -> None:
    global _log_sink_id
    if _log_sink_id is not None:
        logger.remove(_log_sink_id)
        _log_sink_id = None


def _load_provider_or_404(store: CatalogStore, provider_id: str) -> Provider:
    try:
        return get_provider(store, provider_id)
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail=f"Unknown provider '{provider_id}'")
    except ValueError as e:
        logger.exception("Provider {} failed validation: {}", provider_id, e)
        raise HTTPException(status_code=500, detail="Provider catalog invalid")


def _respond(
    result: ClassificationResult,
    query: str,
    store: CatalogStore,
    provider_id: Optional[str],
    vision_confidence: Optional[float] = None,
) -> ClassifyResponse:
    material = None
    if provider_id:
        provider = _load_provider_or_404(store, provider_id)
        material = material_from_classification(provider, result, query)
    blended = None
    if vision_confidence is not None:
        blended = blend_confidence(result.confidence, vision=vision_confidence)
    return ClassifyResponse(
        **result.model_dump(),
        material=material,
        blended_confidence=blended,
    )


# -----------------------
# Routes
# -----------------------

@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="healthy")


@app.post("/classify", response_model=ClassifyResponse)
def classify_item(req: ClassifyRequest, store: CatalogStore = Depends(get_store)) -> ClassifyResponse:
    result = classify(
        req.query,
        store,
        labels=req.labels,
        followup_answer=req.followup_answer,
    )
    return _respond(result, req.query, store, req.provider, req.vision_confidence)


@app.post("/scan", response_model=ClassifyResponse)
async def scan_item(
    request: Request,
    q: str = "",
    provider: Optional[str] = None,
    store: CatalogStore = Depends(get_store),
) -> ClassifyResponse:
    image = await request.body()
    content_type = request.headers.get("content-type", "image/jpeg")
    labels: List[str] = await run_in_threadpool(fetch_labels, image, content_type=content_type)
    # without a typed hint, the strongest label stands in for the query
    query = clean_query_text(q) or (labels[0] if labels else "")
    result = await run_in_threadpool(classify, query, store, labels)
    return _respond(result, query, store, provider)


@app.get("/search", response_model=List[SearchResult])
def search(
    q: str = "",
    provider: str = DEFAULT_PROVIDER_ID,
    store: CatalogStore = Depends(get_store),
) -> List[SearchResult]:
    query = clean_query_text(q)
    if not query:
        return []
    prov = _load_provider_or_404(store, provider)
    return to_search_results(search_materials(prov, query, SEARCH_RESULTS_LIMIT), SEARCH_RESULTS_LIMIT)


@app.get("/providers", response_model=List[ProviderSummary])
def providers(store: CatalogStore = Depends(get_store)) -> List[ProviderSummary]:
    summaries: List[ProviderSummary] = []
    for pid in list_provider_ids():
        try:
            summaries.append(summarize_provider(get_provider(store, pid)))
        except (OSError, ValueError) as e:
            # unreadable jurisdiction file: list the rest
            logger.warning("Skipping provider {}: {}", pid, e)
    return summaries


# -----------------------
# CLI convenience
# -----------------------

def classify_single_query(query: str, store: Optional[CatalogStore] = None) -> ClassificationResult:
    return classify(query, store or app.state.store)
