from wastewise.catalog_store import (
    CatalogStore,
    get_concept,
    get_concepts,
    get_provider,
    provider_catalog_id,
)
from wastewise.config import CONCEPT_CATALOG_ID

from conftest import make_concept


def test_concepts_load_once():
    calls = []

    def loader():
        calls.append(1)
        return [make_concept("jar", "Glass jar")]

    store = CatalogStore()
    first = get_concepts(store, loader=loader)
    second = get_concepts(store, loader=loader)
    assert first is second
    assert len(calls) == 1
    assert store.is_loaded(CONCEPT_CATALOG_ID)
    assert get_concept(store, "jar").name == "Glass jar"
    assert get_concept(store, "missing") is None


def test_clear_forces_reload():
    calls = []

    def loader():
        calls.append(1)
        return []

    store = CatalogStore()
    get_concepts(store, loader=loader)
    store.clear()
    assert not store.is_loaded(CONCEPT_CATALOG_ID)
    get_concepts(store, loader=loader)
    assert len(calls) == 2


def test_clear_single_catalog():
    store = CatalogStore()
    get_concepts(store, loader=lambda: [])
    get_provider(store, "general")
    store.clear(CONCEPT_CATALOG_ID)
    assert store.loaded_ids() == [provider_catalog_id("general")]


def test_provider_entries_are_indexed():
    store = CatalogStore()
    provider = get_provider(store, "general")
    key = provider_catalog_id("general")
    assert len(store.entries(key)) == len(provider.materials)
    assert store.get_entry(key, "batteries").category.value == "hazardous"
    assert store.entries("unknown") == []
