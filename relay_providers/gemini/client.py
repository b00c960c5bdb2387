"""GeminiAdapter built on the ``google-genai`` SDK.

Each adapter owns a ``genai.Client`` configured with its own key, so several
adapters with different keys or endpoints can coexist in one process.

- ``test_connection`` generates a reply to "Hello" with ``gemini-1.5-flash``.
- ``list_models`` lists ``generateContent``-capable models and falls back to
  the catalog.
- Streaming iterates ``generate_content_stream``. The SDK exposes no abort
  handle for that iterator, so cancellation is observed between responses.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Optional

from google import genai

from ..base.adapter import BaseAdapter
from ..base.cancellation import CancellationToken
from ..base.models import ChatRequest, ChatResponse, ModelDescriptor, StreamChunk
from ..base.openai_style_parts import as_dict
from ..base.timeouts import get_timeout_config
from ..catalog import ModelCatalog
from ..config import get_provider_config
from ..config.defaults import CONNECTION_TEST_PROMPT, GEMINI_TEST_MODEL
from .helpers import build_config, build_contents, parse_response
from .stream_helpers import GeminiChunkTranslator

_MODEL_NAME_PREFIX = "models/"


def _model_id(name: str) -> str:
    return name[len(_MODEL_NAME_PREFIX):] if name.startswith(_MODEL_NAME_PREFIX) else name


class GeminiAdapter(BaseAdapter):
    """Google Gemini adapter registered as provider ``google``.

    Parameters:
        api_key: Gemini API key.
        endpoint: Optional API base URL override.
        client: Pre-built ``genai.Client``; used by tests to inject fakes.
    """

    provider_name = "google"

    def __init__(
        self,
        api_key: Optional[str],
        endpoint: Optional[str] = None,
        *,
        client: Any = None,
        catalog: Optional[ModelCatalog] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(api_key, endpoint, catalog=catalog, logger=logger)
        cfg = get_provider_config(self.provider_name, {"base_url": endpoint})
        self._base_url: Optional[str] = cfg.get("base_url")
        self._client = client

    def _sdk(self) -> Any:
        if self._client is None:
            # HttpOptions.timeout is in milliseconds.
            http_options = {"timeout": int(get_timeout_config().http_timeout_seconds * 1000)}
            if self._base_url:
                http_options["base_url"] = self._base_url
            self._client = genai.Client(api_key=self._api_key, http_options=http_options)
        return self._client

    def _check_connection(self) -> bool:
        self._sdk().models.generate_content(model=GEMINI_TEST_MODEL, contents=CONNECTION_TEST_PROMPT)
        return True

    def _discover_models(self) -> Optional[List[ModelDescriptor]]:
        out: List[ModelDescriptor] = []
        for model in self._sdk().models.list():
            actions = getattr(model, "supported_actions", None)
            if actions and "generateContent" not in actions:
                continue
            out.append(
                self._descriptor_for(
                    _model_id(model.name or ""),
                    display_name=getattr(model, "display_name", None),
                    context_window_tokens=getattr(model, "input_token_limit", None),
                    max_output_tokens=getattr(model, "output_token_limit", None),
                )
            )
        return out

    def _send(self, request: ChatRequest, token: CancellationToken) -> ChatResponse:
        response = self._sdk().models.generate_content(
            model=request.model,
            contents=build_contents(request.messages),
            config=build_config(request),
        )
        return parse_response(as_dict(response), provider=self.provider_name, model=request.model)

    def _open_stream(self, request: ChatRequest, token: CancellationToken) -> Iterable[Any]:
        stream = self._sdk().models.generate_content_stream(
            model=request.model,
            contents=build_contents(request.messages),
            config=build_config(request),
        )
        token.raise_if_cancelled()
        return stream

    def _stream_translator(self, request: ChatRequest) -> Callable[[Any], Iterable[StreamChunk]]:
        return GeminiChunkTranslator()


__all__ = ["GeminiAdapter"]
