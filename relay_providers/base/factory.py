"""Provider factory.

Purpose
-------
Map case-insensitive provider names to adapter constructors and answer
catalog queries without a live connection. Built-in adapters are imported
lazily with ``importlib`` so that creating an OpenRouter adapter never
imports the Anthropic or Gemini SDKs.

Extension
---------
``register(name, constructor)`` adds or replaces a provider at runtime. A
constructor is any callable ``(api_key, endpoint) -> adapter``; no
subclassing is required. Registration is expected at startup; lookups take
no lock.

Failure modes
-------------
- Unknown names raise :class:`UnsupportedProviderError`.
- A built-in whose module or class cannot be imported raises the same error
  with the import failure chained.
- Constructor exceptions propagate unchanged.
"""

from __future__ import annotations

from importlib import import_module
from typing import Callable, Dict, List, Optional, Tuple, Union

from ..catalog import ModelCatalog, get_catalog
from ..config.env import get_env_var_candidates, resolve_provider_key
from .errors import ErrorCode, MissingCredentialError, UnsupportedProviderError
from .interfaces import AdapterConstructor, ProviderAdapter
from .models import ModelDescriptor

# Canonical provider names mapped to import paths and class names.
_BUILTINS: Dict[str, Dict[str, str]] = {
    "openai": {"module": "relay_providers.openai.client", "class": "OpenAIAdapter"},
    "anthropic": {"module": "relay_providers.anthropic.client", "class": "AnthropicAdapter"},
    "google": {"module": "relay_providers.gemini.client", "class": "GeminiAdapter"},
    "openrouter": {"module": "relay_providers.openrouter.client", "class": "OpenRouterAdapter"},
    "requesty": {"module": "relay_providers.requesty.client", "class": "RequestyAdapter"},
}

_Entry = Union[Dict[str, str], AdapterConstructor, Callable[..., ProviderAdapter]]


def _canonical(name: Optional[str]) -> str:
    return (name or "").strip().lower()


class ProviderFactory:
    """Create adapters by provider name and expose the static catalog.

    Parameters
    ----------
    catalog:
        Catalog handed to built-in adapters and used for catalog queries.
        Defaults to the process-wide catalog.
    """

    def __init__(self, catalog: Optional[ModelCatalog] = None) -> None:
        self._catalog = catalog
        self._entries: Dict[str, _Entry] = dict(_BUILTINS)

    @property
    def catalog(self) -> ModelCatalog:
        return self._catalog or get_catalog()

    # ------------------------------------------------------------------
    # Registry

    def register(self, name: str, constructor: Callable[..., ProviderAdapter]) -> None:
        """Register ``constructor`` under ``name``, replacing any existing entry."""
        key = _canonical(name)
        if not key:
            raise ValueError("provider name must be non-empty")
        if not callable(constructor):
            raise TypeError(f"constructor for '{key}' is not callable")
        self._entries[key] = constructor

    def is_supported(self, name: Optional[str]) -> bool:
        return _canonical(name) in self._entries

    def supported(self) -> Tuple[str, ...]:
        """Return canonical provider names in registration order."""
        return tuple(self._entries)

    def create(self, name: str, api_key: Optional[str], endpoint: Optional[str] = None) -> ProviderAdapter:
        """Create an adapter for ``name``.

        Raises
        ------
        UnsupportedProviderError
            If no constructor is registered for ``name`` or a built-in
            adapter cannot be imported.
        """
        key = _canonical(name)
        entry = self._entries.get(key)
        if entry is None:
            raise UnsupportedProviderError(
                code=ErrorCode.UNSUPPORTED,
                message=f"unsupported provider '{name}'",
                provider=key or str(name),
            )
        if isinstance(entry, dict):
            return self._load_builtin(key, entry)(api_key, endpoint, catalog=self._catalog)
        return entry(api_key, endpoint)

    def create_from_env(self, name: str, endpoint: Optional[str] = None) -> ProviderAdapter:
        """Create an adapter with its key resolved from the environment.

        Raises
        ------
        MissingCredentialError
            If none of the provider's environment variables holds a real key.
        """
        key = _canonical(name)
        if not self.is_supported(key):
            return self.create(name, None, endpoint)
        api_key, _ = resolve_provider_key(key)
        if not api_key:
            names = ", ".join(get_env_var_candidates(key)) or f"{key.upper()}_API_KEY"
            raise MissingCredentialError(
                code=ErrorCode.AUTH,
                message=f"API key is required for {key}; set {names}",
                provider=key,
            )
        return self.create(key, api_key, endpoint)

    @staticmethod
    def _load_builtin(name: str, spec: Dict[str, str]) -> Callable[..., ProviderAdapter]:
        module_path, class_name = spec["module"], spec["class"]
        try:
            return getattr(import_module(module_path), class_name)
        except (ImportError, AttributeError) as exc:
            raise UnsupportedProviderError(
                code=ErrorCode.UNSUPPORTED,
                message=f"adapter '{class_name}' for provider '{name}' could not be loaded: {exc}",
                provider=name,
                raw=exc,
            ) from exc

    # ------------------------------------------------------------------
    # Catalog queries

    def models_for(self, provider: str) -> List[ModelDescriptor]:
        return self.catalog.models_for(_canonical(provider))

    def all_models(self) -> List[ModelDescriptor]:
        return self.catalog.all_models()

    def find_model(self, model_id: str, provider: Optional[str] = None) -> Optional[ModelDescriptor]:
        return self.catalog.find_model(model_id, _canonical(provider) or None)


_FACTORY: Optional[ProviderFactory] = None


def get_factory() -> ProviderFactory:
    """Return the process-wide factory."""
    global _FACTORY
    if _FACTORY is None:
        _FACTORY = ProviderFactory()
    return _FACTORY


def create(name: str, api_key: Optional[str], endpoint: Optional[str] = None) -> ProviderAdapter:
    """Shortcut for ``get_factory().create(...)``."""
    return get_factory().create(name, api_key, endpoint)


__all__ = ["ProviderFactory", "get_factory", "create"]
