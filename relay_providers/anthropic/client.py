"""AnthropicAdapter built on the official ``anthropic`` SDK.

Key behaviours:
* ``test_connection`` sends a one-token message to ``claude-3-haiku-20240307``.
* ``list_models`` uses ``client.models.list()`` and enriches known ids from
  the catalog; the catalog is the fallback.
* ``max_tokens`` defaults to 4096 because the Messages API requires it.
* Streaming uses ``messages.create(stream=True)``; the returned ``Stream``
  is closed through the cancellation token on cancel.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Optional

import anthropic

from ..base.adapter import BaseAdapter
from ..base.cancellation import CancellationToken
from ..base.models import ChatRequest, ChatResponse, ModelDescriptor, StreamChunk
from ..base.openai_style_parts import as_dict
from ..base.timeouts import get_timeout_config
from ..catalog import ModelCatalog
from ..config import get_provider_config
from ..config.defaults import ANTHROPIC_DEFAULT_MAX_TOKENS, ANTHROPIC_TEST_MODEL, CONNECTION_TEST_PROMPT
from .helpers import build_params, parse_message
from .stream_helpers import AnthropicEventTranslator


class AnthropicAdapter(BaseAdapter):
    """Anthropic Messages API adapter.

    Parameters:
        api_key: Anthropic API key.
        endpoint: Optional base URL override.
        client: Pre-built SDK client; used by tests to inject fakes.
    """

    provider_name = "anthropic"

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
            self._client = anthropic.Anthropic(
                api_key=self._api_key,
                base_url=self._base_url,
                timeout=get_timeout_config().to_httpx(),
                max_retries=0,
            )
        return self._client

    def _check_connection(self) -> bool:
        self._sdk().messages.create(
            model=ANTHROPIC_TEST_MODEL,
            max_tokens=1,
            messages=[{"role": "user", "content": CONNECTION_TEST_PROMPT}],
        )
        return True

    def _discover_models(self) -> Optional[List[ModelDescriptor]]:
        return [
            self._descriptor_for(model.id, display_name=getattr(model, "display_name", None))
            for model in self._sdk().models.list()
        ]

    def _send(self, request: ChatRequest, token: CancellationToken) -> ChatResponse:
        message = self._sdk().messages.create(**build_params(request, default_max_tokens=ANTHROPIC_DEFAULT_MAX_TOKENS))
        return parse_message(as_dict(message), provider=self.provider_name, model=request.model)

    def _open_stream(self, request: ChatRequest, token: CancellationToken) -> Iterable[Any]:
        stream = self._sdk().messages.create(**build_params(request, default_max_tokens=ANTHROPIC_DEFAULT_MAX_TOKENS))
        close = getattr(stream, "close", None)
        if callable(close):
            token.add_callback(close)
        token.raise_if_cancelled()
        return stream

    def _stream_translator(self, request: ChatRequest) -> Callable[[Any], Iterable[StreamChunk]]:
        return AnthropicEventTranslator(provider=self.provider_name)


__all__ = ["AnthropicAdapter"]
