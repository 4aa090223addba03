# wastewise/catalog_store.py
from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, TypeVar

from loguru import logger

from .catalog_build import load_concepts, load_provider
from .config import CONCEPT_CATALOG_ID, Concept, Provider

T = TypeVar("T")


class CatalogStore:
    """
    In-memory cache of catalogs keyed by catalog id.

    Each catalog is loaded at most once (first access) and kept until
    ``clear()``. Concurrent first loads may race; both writers store the same
    data, so no lock is taken.
    """

    def __init__(self) -> None:
        self._payloads: Dict[str, object] = {}
        self._entries: Dict[str, List] = {}
        self._index: Dict[str, Dict[str, object]] = {}

    def get_or_load(self, catalog_id: str, loader: Callable[[], T], entries: Optional[Callable[[T], Sequence]] = None) -> T:
        """
        Return the cached payload for ``catalog_id`` or call ``loader()``
        once and cache it. ``entries`` extracts the entry list from the
        payload (defaults to the payload itself).
        """
        if catalog_id in self._payloads:
            return self._payloads[catalog_id]  # type: ignore[return-value]

        payload = loader()
        items = list(entries(payload) if entries is not None else payload)  # type: ignore[arg-type]
        self._entries[catalog_id] = items
        self._index[catalog_id] = {e.id: e for e in items}
        self._payloads[catalog_id] = payload
        logger.info("Cached catalog {} ({} entries)", catalog_id, len(items))
        return payload

    def entries(self, catalog_id: str) -> List:
        return list(self._entries.get(catalog_id, []))

    def get_entry(self, catalog_id: str, entry_id: str):
        return self._index.get(catalog_id, {}).get(entry_id)

    def is_loaded(self, catalog_id: str) -> bool:
        return catalog_id in self._payloads

    def loaded_ids(self) -> List[str]:
        return sorted(self._payloads)

    def clear(self, catalog_id: Optional[str] = None) -> None:
        """Drop one catalog, or everything when no id is given."""
        if catalog_id is None:
            self._payloads.clear()
            self._entries.clear()
            self._index.clear()
            logger.debug("Catalog store cleared")
            return
        self._payloads.pop(catalog_id, None)
        self._entries.pop(catalog_id, None)
        self._index.pop(catalog_id, None)


def provider_catalog_id(provider_id: str) -> str:
    return f"provider:{provider_id}"


def get_concepts(store: CatalogStore, loader: Callable[[], List[Concept]] = load_concepts) -> List[Concept]:
    return store.get_or_load(CONCEPT_CATALOG_ID, loader)


def get_concept(store: CatalogStore, concept_id: str) -> Optional[Concept]:
    return store.get_entry(CONCEPT_CATALOG_ID, concept_id)


def get_provider(
    store: CatalogStore,
    provider_id: str,
    loader: Callable[[str], Provider] = load_provider,
) -> Provider:
    return store.get_or_load(
        provider_catalog_id(provider_id),
        lambda: loader(provider_id),
        entries=lambda p: p.materials,
    )
