"""Shared adapter base.

``BaseAdapter`` implements the lifecycle every provider shares and leaves
the wire translation to five hooks:

``_check_connection()``
    Cheapest authenticated call; its truthiness is the connection result.
``_discover_models()``
    Live model listing, or ``None`` when the provider has none.
``_send(request, token)``
    Single-shot round trip returning a ``ChatResponse``.
``_open_stream(request, token)``
    Opens the upstream stream and returns an iterable of native events. Must
    register a transport abort on ``token`` where the transport supports one.
``_stream_translator(request)``
    Returns a fresh per-call ``event -> [StreamChunk]`` function (it owns the
    tool-call tracking state for that call).

Lifecycle guarantees:

- an empty API key raises ``MissingCredentialError`` before any I/O;
- at most one call is in flight per instance: beginning a call cancels the
  previous token, and the token is cleared when the call ends for any reason;
- failures are logged as ``[<AdapterClass>.<method>]`` and raised as
  ``ProviderError`` values prefixed with the provider name;
- cancellation never surfaces as an error.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Any, Callable, ClassVar, Iterable, List, Optional

from ..catalog import ModelCatalog, get_catalog
from .cancellation import CancellationToken
from .dto import validate_request
from .errors import ErrorCode, MissingCredentialError, ProviderError, wrap_upstream_error
from .logging import LogContext, get_logger, log_adapter_error, log_event
from .models import ChatRequest, ChatResponse, ModelDescriptor, StreamChunk
from .streaming import StreamRunner, StreamState
from .streaming.stream_runner import Sink


class BaseAdapter:
    """Common lifecycle for provider adapters; subclasses set ``provider_name``."""

    provider_name: ClassVar[str] = ""

    def __init__(
        self,
        api_key: Optional[str],
        endpoint: Optional[str] = None,
        *,
        catalog: Optional[ModelCatalog] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._api_key = api_key or ""
        self._endpoint = endpoint or None
        self._catalog = catalog
        self._logger = logger or get_logger(f"relay.{self.provider_name}")
        self._token_lock = threading.Lock()
        self._token: Optional[CancellationToken] = None
        self.last_stream_state: StreamState = StreamState.IDLE

    # ------------------------------------------------------------------
    # Identity and configuration

    @property
    def provider(self) -> str:
        return self.provider_name

    @property
    def endpoint(self) -> Optional[str]:
        return self._endpoint

    @property
    def has_api_key(self) -> bool:
        return bool(self._api_key.strip())

    @property
    def catalog(self) -> ModelCatalog:
        return self._catalog or get_catalog()

    def _label(self) -> str:
        return type(self).__name__

    def _ctx(self, model: Optional[str] = None, **extra: Any) -> LogContext:
        return LogContext(provider=self.provider_name, model=model).bind(**extra)

    def validate_api_key(self) -> None:
        """Raise ``MissingCredentialError`` when no usable key is configured."""
        if not self.has_api_key:
            raise MissingCredentialError(
                code=ErrorCode.AUTH,
                message=f"API key is required for {self.provider_name}",
                provider=self.provider_name,
            )

    # ------------------------------------------------------------------
    # Cancellation token management

    def _begin_call(self) -> CancellationToken:
        """Cancel any outstanding call and install a fresh token."""
        token = CancellationToken()
        with self._token_lock:
            previous, self._token = self._token, token
        if previous is not None:
            previous.cancel("superseded by a new call")
        return token

    def _end_call(self, token: CancellationToken) -> None:
        with self._token_lock:
            if self._token is token:
                self._token = None

    @property
    def in_flight(self) -> bool:
        return self._token is not None

    def cancel(self) -> None:
        """Abort the outstanding call, if any. Safe to call from any thread or a sink."""
        with self._token_lock:
            token, self._token = self._token, None
        if token is not None:
            token.cancel("cancelled by caller")

    # ------------------------------------------------------------------
    # Contract operations

    def test_connection(self) -> bool:
        if not self.has_api_key:
            return False
        try:
            return bool(self._check_connection())
        except Exception as exc:
            log_adapter_error(self._logger, self._label(), "test_connection", exc, self._ctx())
            return False

    def list_models(self) -> List[ModelDescriptor]:
        live: Optional[List[ModelDescriptor]] = None
        if self.has_api_key:
            try:
                live = self._discover_models()
            except Exception as exc:
                log_adapter_error(self._logger, self._label(), "list_models", exc, self._ctx())
        if live:
            return live
        fallback = self.catalog.models_for(self.provider_name)
        log_event(self._logger, "models.fallback", self._ctx(), count=len(fallback))
        return fallback

    def send(self, request: ChatRequest) -> ChatResponse:
        self.validate_api_key()
        validate_request(request, provider=self.provider_name)
        if request.stream:
            raise ProviderError(
                code=ErrorCode.VALIDATION,
                message="streaming requests must use send_streaming",
                provider=self.provider_name,
                model=request.model,
            )
        ctx = self._ctx(request.model, messages=len(request.messages), tools=len(request.tools or []))
        token = self._begin_call()
        log_event(self._logger, "chat.start", ctx)
        try:
            response = self._send(request, token)
        except Exception as exc:
            error = wrap_upstream_error(exc, provider=self.provider_name, model=request.model)
            log_adapter_error(self._logger, self._label(), "send", error, ctx)
            if error is exc:
                raise
            raise error from exc
        finally:
            self._end_call(token)
        log_event(
            self._logger,
            "chat.end",
            ctx,
            response_id=response.id,
            tool_calls=len(response.tool_calls or []),
        )
        return response

    def send_streaming(self, request: ChatRequest, sink: Sink) -> None:
        self.validate_api_key()
        validate_request(request, provider=self.provider_name)
        streaming_request = request if request.stream else replace(request, stream=True)
        ctx = self._ctx(request.model)
        token = self._begin_call()
        runner = StreamRunner(
            provider=self.provider_name,
            model=request.model,
            token=token,
            logger=self._logger,
            ctx=ctx,
        )
        try:
            runner.run(
                lambda: self._open_stream(streaming_request, token),
                self._stream_translator(streaming_request),
                sink,
            )
        except ProviderError as exc:
            log_adapter_error(self._logger, self._label(), "send_streaming", exc, ctx)
            raise
        finally:
            self.last_stream_state = runner.state
            self._end_call(token)

    # ------------------------------------------------------------------
    # Helpers for subclasses

    def _descriptor_for(self, model_id: str, **observed: Any) -> ModelDescriptor:
        """Return the catalog descriptor for ``model_id`` or one built from ``observed``.

        ``observed`` values override the catalog only when it has no entry;
        catalog data is curated and wins for known ids.
        """
        known = self.catalog.find_model(model_id, self.provider_name)
        if known is not None:
            return known
        return ModelDescriptor(
            id=model_id,
            display_name=observed.pop("display_name", None) or model_id,
            provider=self.provider_name,
            **{k: v for k, v in observed.items() if v is not None},
        )

    # ------------------------------------------------------------------
    # Provider hooks

    def _check_connection(self) -> bool:
        raise NotImplementedError

    def _discover_models(self) -> Optional[List[ModelDescriptor]]:
        return None

    def _send(self, request: ChatRequest, token: CancellationToken) -> ChatResponse:
        raise NotImplementedError

    def _open_stream(self, request: ChatRequest, token: CancellationToken) -> Iterable[Any]:
        raise NotImplementedError

    def _stream_translator(self, request: ChatRequest) -> Callable[[Any], Iterable[StreamChunk]]:
        raise NotImplementedError


__all__ = ["BaseAdapter"]
