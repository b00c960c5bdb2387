"""OpenRouter adapter (OpenAI-compatible HTTP with frame-parsed streaming).

Behaviour beyond the shared HTTP base:
    - ``list_models`` performs live discovery through ``GET /models``.
    - Single-shot responses without an id are reported as
      ``"openrouter-response"``.

Defaults: base URL ``https://openrouter.ai/api/v1``, temperature 0.7 and
``max_tokens`` 4096 unless the request sets them.
"""

from __future__ import annotations

from typing import List, Optional

from ..base.models import ModelDescriptor
from ..base.openai_style_parts.http_adapter import OpenAICompatibleHttpAdapter
from ..config.defaults import OPENROUTER_DEFAULT_BASE_URL, OPENROUTER_RESPONSE_FALLBACK_ID
from .get_openrouter_models import descriptors_from_listing


class OpenRouterAdapter(OpenAICompatibleHttpAdapter):
    """OpenRouter chat completions adapter."""

    provider_name = "openrouter"
    default_base_url = OPENROUTER_DEFAULT_BASE_URL
    response_fallback_id = OPENROUTER_RESPONSE_FALLBACK_ID

    def _discover_models(self) -> Optional[List[ModelDescriptor]]:
        response = self._client("models").get(self._url("/models"), headers=self._headers())
        if response.status_code != 200:
            raise self._status_error(response, action="model listing")
        return descriptors_from_listing(response.json(), self.provider_name)


__all__ = ["OpenRouterAdapter"]
