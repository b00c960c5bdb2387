"""Static model catalog: bundled documents, lookups and isolated instances."""
from __future__ import annotations

from relay_providers.catalog import ModelCatalog, get_catalog


def test_bundled_catalog_lists_all_providers():
    catalog = ModelCatalog()
    assert set(catalog.providers()) == {"openai", "anthropic", "google", "openrouter", "requesty"}  # nosec B101
    assert catalog.display_name("openrouter") == "OpenRouter"  # nosec B101
    assert catalog.display_name("unknown") == "unknown"  # nosec B101


def test_models_for_is_case_insensitive_and_provider_scoped():
    catalog = ModelCatalog()
    google = catalog.models_for("Google")
    assert google and all(m.provider == "google" for m in google)  # nosec B101
    assert catalog.models_for("nope") == []  # nosec B101


def test_find_model_with_and_without_provider():
    catalog = ModelCatalog()
    via_router = catalog.find_model("openai/gpt-4.1", "requesty")
    assert via_router is not None and via_router.provider == "requesty"  # nosec B101
    assert catalog.find_model("gpt-4o") is not None  # nosec B101
    assert catalog.find_model("gpt-4o", "anthropic") is None  # nosec B101
    assert catalog.find_model("does-not-exist") is None  # nosec B101


def test_ids_unique_per_provider():
    catalog = ModelCatalog()
    for provider in catalog.providers():
        ids = [m.id for m in catalog.models_for(provider)]
        assert len(ids) == len(set(ids)), provider  # nosec B101


def test_isolated_documents_and_defaults(log_capture):
    catalog = ModelCatalog(
        documents={
            "Demo": {
                "models": [
                    {"id": "a", "name": "A", "supports_json": True},
                    {"id": "a", "name": "A duplicate"},
                    {"id": "b"},
                ]
            }
        }
    )
    assert catalog.initialized is False  # nosec B101
    assert catalog.initialize() is catalog and catalog.initialized  # nosec B101
    models = catalog.models_for("demo")
    assert [m.display_name for m in models] == ["A", "b"]  # nosec B101
    assert models[0].supports_json_mode is True  # nosec B101
    assert models[1].context_window_tokens == 4096 and models[1].max_output_tokens == 4096  # nosec B101
    assert catalog.all_models() == models  # nosec B101
    assert log_capture.events("catalog.loaded")[-1]["models"] == 2  # nosec B101


def test_process_catalog_is_shared():
    assert get_catalog() is get_catalog()  # nosec B101
