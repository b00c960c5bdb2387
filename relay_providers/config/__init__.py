"""Configuration layer for provider adapters.

Merge order (later wins):
    1. Built-in defaults (``config.defaults``)
    2. Optional external file named by ``RELAY_PROVIDERS_CONFIG`` (JSON first,
       then YAML)
    3. Environment variables ``<PROVIDER>_BASE_URL``, ``<PROVIDER>_APP_URL``,
       ``<PROVIDER>_APP_TITLE``
    4. In-code overrides passed to :func:`get_provider_config`

Example file::

    openrouter:
      base_url: https://openrouter.ai/api/v1
      app_url: https://example.org/my-app
      app_title: My App

API keys are deliberately not part of this merge: adapters receive their key
at construction and :func:`relay_providers.config.env.resolve_provider_key`
is the only place the environment is consulted for secrets.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional

import yaml

from .defaults import DEFAULT_APP_TITLE, OPENROUTER_DEFAULT_BASE_URL, REQUESTY_DEFAULT_BASE_URL

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "openai": {},
    "anthropic": {},
    "google": {},
    "openrouter": {"base_url": OPENROUTER_DEFAULT_BASE_URL, "app_title": DEFAULT_APP_TITLE},
    "requesty": {"base_url": REQUESTY_DEFAULT_BASE_URL, "app_title": DEFAULT_APP_TITLE},
}

ENV_FIELD_MAP = {
    "base_url": "BASE_URL",
    "app_url": "APP_URL",
    "app_title": "APP_TITLE",
}

_FILE_CACHE: Optional[Dict[str, Any]] = None
_FILE_LOCK = Lock()


def _parse_config_text(text: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except ValueError:
        data = yaml.safe_load(text) or {}
    return data if isinstance(data, dict) else {}


def _load_external_config() -> Dict[str, Any]:
    global _FILE_CACHE
    with _FILE_LOCK:
        if _FILE_CACHE is not None:
            return _FILE_CACHE
        path = os.getenv("RELAY_PROVIDERS_CONFIG")
        data: Dict[str, Any] = {}
        if path and Path(path).is_file():
            data = _parse_config_text(Path(path).read_text(encoding="utf-8"))
        _FILE_CACHE = data
        return data


def reset_config_cache() -> None:
    """Forget the parsed external file so the next lookup re-reads it."""
    global _FILE_CACHE
    with _FILE_LOCK:
        _FILE_CACHE = None


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = provider.upper()
    for field, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if val:
            out[field] = val
    return out


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged, non-secret configuration for ``provider``.

    Unknown providers yield whatever the file, environment and overrides
    supply, which lets runtime-registered adapters use the same mechanism.
    ``None`` values in ``overrides`` are ignored.
    """
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = {}
    cfg |= DEFAULTS.get(name, {})
    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= {k: v for k, v in file_cfg.items() if k != "api_key"}
    cfg |= _env_overrides(name)
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    return cfg


__all__ = ["DEFAULTS", "get_provider_config", "reset_config_cache"]
