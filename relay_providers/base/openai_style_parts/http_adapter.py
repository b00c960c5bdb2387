"""
Base adapter for OpenAI-compatible HTTP routers.

OpenRouter and Requesty expose the OpenAI chat completions API over plain
HTTPS with ``text/event-stream`` streaming. This base speaks that protocol
with ``httpx`` and the shared frame parser; subclasses only set their name,
default base URL and response id fallback, and optionally live model
discovery.

Transport:
    - Non-stream: ``POST {base_url}/chat/completions``.
    - Stream: the same request sent with ``stream=True`` on the httpx client;
      the response's ``close`` is registered on the cancellation token so a
      cancel stops byte reading, and the frame parser checks the token
      between reads.
    - Clients come from the shared pool unless one is injected.

Headers: ``Authorization: Bearer``, ``Content-Type``, ``X-Title`` and, when
configured, ``HTTP-Referer``. The key is never logged.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, ClassVar, Dict, Iterable, Iterator, Optional

import httpx

from ...catalog import ModelCatalog
from ...config import get_provider_config
from ...config.defaults import DEFAULT_MAX_OUTPUT_TOKENS, DEFAULT_TEMPERATURE, STREAM_FALLBACK_ID
from ..adapter import BaseAdapter
from ..cancellation import CancellationToken
from ..errors import RETRYABLE_CODES, UpstreamTransportError, classify_exception
from ..http import get_httpx_client
from ..models import ChatRequest, ChatResponse, StreamChunk
from ..streaming import iter_sse_payloads
from .payload import build_chat_payload
from .translate import OpenAIChunkTranslator, parse_completion

_ERROR_BODY_LIMIT = 500


class OpenAICompatibleHttpAdapter(BaseAdapter):
    """Shared HTTP implementation for OpenAI-compatible routers."""

    default_base_url: ClassVar[str] = ""
    response_fallback_id: ClassVar[str] = "response"

    def __init__(
        self,
        api_key: Optional[str],
        endpoint: Optional[str] = None,
        *,
        http_client: Optional[httpx.Client] = None,
        catalog: Optional[ModelCatalog] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(api_key, endpoint, catalog=catalog, logger=logger)
        cfg = get_provider_config(self.provider_name, {"base_url": endpoint})
        self._base_url = str(cfg.get("base_url") or self.default_base_url).rstrip("/")
        self._app_url: Optional[str] = cfg.get("app_url")
        self._app_title: Optional[str] = cfg.get("app_title")
        self._http_client = http_client

    @property
    def base_url(self) -> str:
        return self._base_url

    # ------------------------------------------------------------------
    # Transport helpers

    def _client(self, purpose: str) -> httpx.Client:
        return self._http_client or get_httpx_client(self._base_url, purpose)

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        if self._app_url:
            headers["HTTP-Referer"] = self._app_url
        if self._app_title:
            headers["X-Title"] = self._app_title
        return headers

    def _status_error(self, response: httpx.Response, action: str = "request") -> UpstreamTransportError:
        """Build the transport error for a non-2xx response (body must be read)."""
        exc = httpx.HTTPStatusError(
            f"HTTP {response.status_code}", request=response.request, response=response
        )
        code = classify_exception(exc)
        body = response.text[:_ERROR_BODY_LIMIT]
        return UpstreamTransportError(
            code=code,
            message=f"{self.provider_name} {action} failed: HTTP {response.status_code}: {body}",
            provider=self.provider_name,
            retryable=code in RETRYABLE_CODES,
            raw=exc,
        )

    def _payload(self, request: ChatRequest) -> Dict[str, Any]:
        return build_chat_payload(
            request,
            default_temperature=DEFAULT_TEMPERATURE,
            default_max_tokens=DEFAULT_MAX_OUTPUT_TOKENS,
        )

    # ------------------------------------------------------------------
    # BaseAdapter hooks

    def _check_connection(self) -> bool:
        response = self._client("models").get(self._url("/models"), headers=self._headers())
        return response.status_code == 200

    def _send(self, request: ChatRequest, token: CancellationToken) -> ChatResponse:
        response = self._client("chat").post(
            self._url("/chat/completions"), json=self._payload(request), headers=self._headers()
        )
        if response.status_code >= 400:
            raise self._status_error(response)
        return parse_completion(
            response.json(),
            provider=self.provider_name,
            fallback_id=self.response_fallback_id,
            model=request.model,
        )

    def _open_stream(self, request: ChatRequest, token: CancellationToken) -> Iterable[Any]:
        client = self._client("stream")
        outbound = client.build_request(
            "POST",
            self._url("/chat/completions"),
            json=self._payload(request),
            headers={**self._headers(), "Accept": "text/event-stream"},
        )
        response = client.send(outbound, stream=True)
        token.add_callback(response.close)
        token.raise_if_cancelled()
        if response.status_code >= 400:
            try:
                response.read()
            finally:
                response.close()
            raise self._status_error(response, action="stream")
        return self._iter_payloads(response, token)

    def _iter_payloads(self, response: httpx.Response, token: CancellationToken) -> Iterator[Any]:
        try:
            yield from iter_sse_payloads(
                response.iter_bytes(),
                token=token,
                logger=self._logger,
                ctx=self._ctx(),
            )
        finally:
            response.close()

    def _stream_translator(self, request: ChatRequest) -> Callable[[Any], Iterable[StreamChunk]]:
        return OpenAIChunkTranslator(provider=self.provider_name, fallback_id=STREAM_FALLBACK_ID)


__all__ = ["OpenAICompatibleHttpAdapter"]
