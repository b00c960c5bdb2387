"""relay_providers.config.env
==========================

Environment variable mapping for provider credentials.

``ENV_MAP`` holds the canonical variable per provider; ``ENV_ALIASES`` lists
accepted names in priority order where more than one is in common use. The
helpers never raise for unknown providers or unset variables; callers decide
what a missing key means (adapters raise ``MissingCredentialError`` at call
time).
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

ENV_MAP: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "google": "GEMINI_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
    "requesty": "REQUESTY_API_KEY",
}

ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "google": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if ``val`` looks like a placeholder rather than a real key.

    Heuristics (case-insensitive): contains ``placeholder``, ``changeme`` or
    ``your-api-key``, or is made only of ``x``/``*`` characters.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    if not v:
        return False
    return "placeholder" in v or "changeme" in v or "your-api-key" in v or set(v) <= {"x", "*"}


def get_env_var_name(provider: str) -> Optional[str]:
    """Return the canonical environment variable name for ``provider``."""
    return ENV_MAP.get(provider.lower().strip()) if provider else None


def get_env_var_candidates(provider: str) -> Iterable[str]:
    """Yield acceptable variable names for ``provider``, canonical first."""
    p = (provider or "").lower().strip()
    canonical = ENV_MAP.get(p)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get(p, ()):
        if alias != canonical:
            yield alias


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Resolve an API key for ``provider`` from the process environment.

    Returns
    -------
    Tuple[Optional[str], Optional[str]]
        ``(value, env_var_used)`` for the first non-empty, non-placeholder
        candidate, or ``(None, None)``.
    """
    for name in get_env_var_candidates(provider):
        val = os.environ.get(name)
        if val and not is_placeholder(val):
            return val, name
    return None, None


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "is_placeholder",
    "get_env_var_name",
    "get_env_var_candidates",
    "resolve_provider_key",
]
