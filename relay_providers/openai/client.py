"""OpenAI adapter built on the official ``openai`` SDK.

- ``test_connection`` lists models (cheapest authenticated call).
- ``list_models`` lists chat-capable models live and enriches known ids with
  catalog data; the catalog is the fallback.
- Requests use the shared OpenAI-style payload; ``max_tokens`` is sent as
  ``max_completion_tokens``, which reasoning models require.
- Streaming iterates the SDK's ``Stream``; its ``close`` is registered on
  the cancellation token so a cancel aborts the HTTP response.

The SDK client is created lazily per adapter instance with the adapter's key,
optional ``base_url`` override and the shared timeouts. SDK retries are
disabled; failures surface to the caller as ``ProviderError``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Optional

from openai import OpenAI

from ..base.adapter import BaseAdapter
from ..base.cancellation import CancellationToken
from ..base.models import ChatRequest, ChatResponse, ModelDescriptor, StreamChunk
from ..base.openai_style_parts import OpenAIChunkTranslator, build_chat_payload, parse_completion
from ..base.timeouts import get_timeout_config
from ..catalog import ModelCatalog
from ..config import get_provider_config
from ..config.defaults import OPENAI_CHAT_MODEL_PREFIXES, OPENAI_RESPONSE_FALLBACK_ID, STREAM_FALLBACK_ID


class OpenAIAdapter(BaseAdapter):
    """OpenAI chat completions adapter.

    Parameters:
        api_key: OpenAI API key.
        endpoint: Optional base URL override (e.g. an Azure or proxy URL).
        client: Pre-built SDK client; used by tests to inject fakes.
    """

    provider_name = "openai"

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
            self._client = OpenAI(
                api_key=self._api_key,
                base_url=self._base_url,
                timeout=get_timeout_config().to_httpx(),
                max_retries=0,
            )
        return self._client

    def _payload(self, request: ChatRequest) -> dict:
        payload = build_chat_payload(request)
        if "max_tokens" in payload:
            payload["max_completion_tokens"] = payload.pop("max_tokens")
        return payload

    def _check_connection(self) -> bool:
        self._sdk().models.list()
        return True

    def _discover_models(self) -> Optional[List[ModelDescriptor]]:
        listed = [getattr(m, "id", None) for m in self._sdk().models.list()]
        ids = sorted(i for i in listed if i and i.startswith(OPENAI_CHAT_MODEL_PREFIXES))
        return [self._descriptor_for(model_id) for model_id in ids]

    def _send(self, request: ChatRequest, token: CancellationToken) -> ChatResponse:
        completion = self._sdk().chat.completions.create(**self._payload(request))
        return parse_completion(
            completion,
            provider=self.provider_name,
            fallback_id=OPENAI_RESPONSE_FALLBACK_ID,
            model=request.model,
        )

    def _open_stream(self, request: ChatRequest, token: CancellationToken) -> Iterable[Any]:
        stream = self._sdk().chat.completions.create(**self._payload(request))
        close = getattr(stream, "close", None)
        if callable(close):
            token.add_callback(close)
        token.raise_if_cancelled()
        return stream

    def _stream_translator(self, request: ChatRequest) -> Callable[[Any], Iterable[StreamChunk]]:
        return OpenAIChunkTranslator(provider=self.provider_name, fallback_id=STREAM_FALLBACK_ID)


__all__ = ["OpenAIAdapter"]
