from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from loguru import logger

from .config import CONCEPTS_DIR, PROVIDERS_DIR, Concept, Provider, ProviderSummary


# ---------------------------
# Validation helpers
# ---------------------------

def _ensure_unique_ids(ids: Iterable[str], source: str) -> None:
    seen: Dict[str, int] = {}
    for i in ids:
        seen[i] = seen.get(i, 0) + 1
    dupes = sorted(i for i, n in seen.items() if n > 1)
    if dupes:
        raise ValueError(f"Duplicate ids in {source}: {dupes}")


def _read_json(path: Path):
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


# ---------------------------
# Concepts
# ---------------------------

def parse_concepts(data, source: str = "<memory>") -> List[Concept]:
    """
    Validate a JSON array of concept definitions.

    Raises pydantic.ValidationError on schema violations.
    """
    if not isinstance(data, list):
        raise ValueError(f"{source}: expected a JSON array of concepts, got {type(data).__name__}")
    return [Concept.model_validate(item) for item in data]


def load_concepts(concepts_dir: Path = CONCEPTS_DIR) -> List[Concept]:
    """
    Load every ``*.json`` file under ``concepts_dir`` in filename order.

    A missing directory yields an empty catalog (logged); malformed files
    raise so a broken ontology is never silently half-loaded.
    """
    if not concepts_dir.is_dir():
        logger.warning("Concepts directory {} not found; concept catalog is empty", concepts_dir)
        return []

    files = sorted(concepts_dir.glob("*.json"))
    concepts: List[Concept] = []
    for path in files:
        parsed = parse_concepts(_read_json(path), source=str(path))
        logger.debug("Loaded {} concepts from {}", len(parsed), path.name)
        concepts.extend(parsed)

    _ensure_unique_ids((c.id for c in concepts), source=str(concepts_dir))
    logger.info("Loaded {} concepts from {} files", len(concepts), len(files))
    return concepts


# ---------------------------
# Providers (per-jurisdiction material lists)
# ---------------------------

def load_provider(provider_id: str, providers_dir: Path = PROVIDERS_DIR) -> Provider:
    """
    Load and validate ``<providers_dir>/<provider_id>.json``.

    Raises FileNotFoundError when the jurisdiction has no file.
    """
    path = providers_dir / f"{provider_id}.json"
    if not path.is_file():
        raise FileNotFoundError(f"No provider file for '{provider_id}' under {providers_dir}")

    logger.info("Loading provider {} from {}", provider_id, path)
    provider = Provider.model_validate(_read_json(path))
    _ensure_unique_ids((m.id for m in provider.materials), source=str(path))
    logger.info("Loaded provider {} with {} materials", provider.id, len(provider.materials))
    return provider


def list_provider_ids(providers_dir: Path = PROVIDERS_DIR) -> List[str]:
    if not providers_dir.is_dir():
        return []
    return sorted(p.stem for p in providers_dir.glob("*.json"))


def summarize_provider(provider: Provider) -> ProviderSummary:
    return ProviderSummary(
        id=provider.id,
        display_name=provider.display_name,
        coverage=provider.coverage,
    )


def find_provider_for_location(
    location: str,
    providers: Iterable[Provider],
    skip_ids: Iterable[str] = ("general",),
) -> Optional[Provider]:
    """
    Return the first provider whose coverage names ``location``: city,
    region, "city, region", a zip code or a coverage alias (case-insensitive).
    """
    needle = (location or "").strip().lower()
    if not needle:
        return None
    skip = set(skip_ids)

    for provider in providers:
        if provider.id in skip:
            continue
        cov = provider.coverage
        city = (cov.city or "").lower()
        region = (cov.region or "").lower()
        if needle in {city, region} - {""}:
            return provider
        if needle in cov.zips:
            return provider
        if any(a.lower() == needle for a in cov.aliases):
            return provider
        if city and region and f"{city}, {region}" == needle:
            return provider
    return None


# ---------------------------
# CLI entrypoint
# ---------------------------

if __name__ == "__main__":
    # Validate the bundled catalogs:
    # python -m wastewise.catalog_build
    load_concepts()
    for pid in list_provider_ids():
        load_provider(pid)
