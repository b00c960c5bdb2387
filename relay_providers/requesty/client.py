"""Requesty adapter (OpenAI-compatible HTTP router).

Requesty speaks the same protocol as OpenRouter; only the defaults differ:
base URL ``https://router.requesty.ai/v1``, response id fallback
``"requesty-response"``. Model listing uses the static catalog because the
router's listing endpoint is not relied upon; ``GET /models`` still serves as
the connectivity check.
"""

from __future__ import annotations

from ..base.openai_style_parts.http_adapter import OpenAICompatibleHttpAdapter
from ..config.defaults import REQUESTY_DEFAULT_BASE_URL, REQUESTY_RESPONSE_FALLBACK_ID


class RequestyAdapter(OpenAICompatibleHttpAdapter):
    """Requesty chat completions adapter."""

    provider_name = "requesty"
    default_base_url = REQUESTY_DEFAULT_BASE_URL
    response_fallback_id = REQUESTY_RESPONSE_FALLBACK_ID


__all__ = ["RequestyAdapter"]
