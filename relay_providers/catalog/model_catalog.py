"""Static model catalog loaded from per-provider YAML documents.

Each file under ``relay_providers/catalog/providers`` describes one provider:

.. code-block:: yaml

    provider: openai
    display_name: OpenAI
    models:
      - id: gpt-4.1
        name: GPT-4.1
        context_length: 1000000
        supports_tools: true
        supports_json: true
        max_output_tokens: 32768

Only ``models`` is required; ``provider`` defaults to the file stem and
``display_name`` to the provider id. The catalog is read once, on the first
query or an explicit :meth:`ModelCatalog.initialize`, and never mutated
afterwards. Queries do not touch the network and work before any adapter
exists.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from ..base.logging import get_logger, log_event
from ..base.models import ModelDescriptor

DEFAULT_CONTEXT_LENGTH = 4096
DEFAULT_MAX_OUTPUT_TOKENS = 4096


def default_catalog_root() -> Path:
    """Return the bundled catalog directory (``relay_providers/catalog/providers``)."""
    return Path(__file__).resolve().parent / "providers"


def _coerce_int(val: Any, default: int) -> int:
    if val is None:
        return default
    try:
        return int(val)
    except (TypeError, ValueError):
        return default


def _load_yaml_document(path: Path) -> Dict[str, Any]:
    """Parse one catalog file.

    Raises
    ------
    ValueError
        If the document root is not a mapping.
    """
    data: Any = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Catalog file {path} must contain a mapping at top level.")
    return data


def _descriptor_from_entry(provider: str, entry: Mapping[str, Any]) -> ModelDescriptor:
    model_id = str(entry.get("id") or entry.get("name") or "").strip()
    if not model_id:
        raise ValueError(f"catalog entry for {provider} is missing an id")
    return ModelDescriptor(
        id=model_id,
        display_name=str(entry.get("name") or model_id),
        provider=provider,
        context_window_tokens=_coerce_int(entry.get("context_length"), DEFAULT_CONTEXT_LENGTH),
        supports_tools=bool(entry.get("supports_tools", False)),
        supports_json_mode=bool(entry.get("supports_json", False)),
        max_output_tokens=_coerce_int(entry.get("max_output_tokens"), DEFAULT_MAX_OUTPUT_TOKENS),
    )


class ModelCatalog:
    """Read-only ``(provider, id) -> ModelDescriptor`` table.

    Parameters
    ----------
    root:
        Directory of ``*.yaml`` provider documents. Defaults to the bundled
        catalog.
    documents:
        Already-parsed documents keyed by provider; when given, ``root`` is
        ignored. Lets tests build isolated catalogs without files.
    """

    def __init__(self, root: Optional[Path] = None, documents: Optional[Mapping[str, Mapping[str, Any]]] = None) -> None:
        self._root = root or default_catalog_root()
        self._documents = documents
        self._lock = threading.Lock()
        self._models: Optional[Dict[str, List[ModelDescriptor]]] = None
        self._display_names: Dict[str, str] = {}
        self._logger = get_logger("relay.catalog")

    def initialize(self) -> "ModelCatalog":
        """Load the catalog now (idempotent). Returns ``self`` for chaining."""
        self._ensure_loaded()
        return self

    @property
    def initialized(self) -> bool:
        return self._models is not None

    def _ensure_loaded(self) -> Dict[str, List[ModelDescriptor]]:
        if self._models is not None:
            return self._models
        with self._lock:
            if self._models is None:
                self._models = self._load()
            return self._models

    def _load(self) -> Dict[str, List[ModelDescriptor]]:
        if self._documents is not None:
            docs = {str(k).lower().strip(): dict(v) for k, v in self._documents.items()}
        else:
            docs = {}
            for path in sorted(self._root.glob("*.yaml")):
                doc = _load_yaml_document(path)
                docs[str(doc.get("provider") or path.stem).lower().strip()] = doc
        models: Dict[str, List[ModelDescriptor]] = {}
        for provider, doc in docs.items():
            self._display_names[provider] = str(doc.get("display_name") or provider)
            seen: Dict[str, ModelDescriptor] = {}
            for entry in doc.get("models") or []:
                descriptor = _descriptor_from_entry(provider, entry)
                # (provider, id) is the key; the first entry for an id wins.
                seen.setdefault(descriptor.id, descriptor)
            models[provider] = list(seen.values())
        log_event(
            self._logger,
            "catalog.loaded",
            providers=len(models),
            models=sum(len(v) for v in models.values()),
        )
        return models

    def providers(self) -> List[str]:
        """Return provider ids present in the catalog, in load order."""
        return list(self._ensure_loaded().keys())

    def display_name(self, provider: str) -> str:
        """Return the provider's display name, or ``provider`` when unknown."""
        self._ensure_loaded()
        key = (provider or "").lower().strip()
        return self._display_names.get(key, provider)

    def models_for(self, provider: str) -> List[ModelDescriptor]:
        """Return the catalogued models for ``provider`` (empty when unknown)."""
        key = (provider or "").lower().strip()
        return list(self._ensure_loaded().get(key, []))

    def all_models(self) -> List[ModelDescriptor]:
        """Return every catalogued model across providers."""
        return [m for models in self._ensure_loaded().values() for m in models]

    def find_model(self, model_id: str, provider: Optional[str] = None) -> Optional[ModelDescriptor]:
        """Return the first model with ``model_id``, optionally within ``provider``."""
        candidates = self.models_for(provider) if provider else self.all_models()
        return next((m for m in candidates if m.id == model_id), None)


_DEFAULT: Optional[ModelCatalog] = None
_DEFAULT_LOCK = threading.Lock()


def get_catalog() -> ModelCatalog:
    """Return the process-wide catalog, creating it lazily on first use."""
    global _DEFAULT
    if _DEFAULT is None:
        with _DEFAULT_LOCK:
            if _DEFAULT is None:
                _DEFAULT = ModelCatalog()
    return _DEFAULT


def initialize() -> ModelCatalog:
    """Load the process-wide catalog eagerly (e.g. at application startup)."""
    return get_catalog().initialize()


__all__ = [
    "ModelCatalog",
    "default_catalog_root",
    "get_catalog",
    "initialize",
]
