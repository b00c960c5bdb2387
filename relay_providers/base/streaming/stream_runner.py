"""Streaming lifecycle driver shared by every adapter.

Adapters supply two callables:

``starter()``
    Opens the upstream stream and returns an iterable of native events
    (SDK event objects, decoded frame payloads, ...). Runs in the
    ``connecting`` state.
``translate(event)``
    Maps one native event to zero or more canonical :class:`StreamChunk`.

The runner pulls one event at a time, checks the cancellation token before
each pull, and hands each chunk to the sink through
:meth:`CancellationToken.deliver`, so no chunk is delivered once ``cancel()``
has returned. Cancellation, including transport errors caused by the cancel
closing the connection, ends the call quietly. Any other failure is raised
once as a :class:`ProviderError` prefixed with the provider name.
"""
from __future__ import annotations

import logging
import time
from contextlib import suppress
from typing import Any, Callable, Iterable, Optional

from ..cancellation import CancellationToken, CancelledError
from ..errors import ErrorCode, ProviderError, UpstreamDecodeError, wrap_upstream_error
from ..logging import LogContext, log_event
from ..models import StreamChunk
from .stream_state import StreamState
from .streaming_metrics import StreamMetrics

Sink = Callable[[StreamChunk], Any]


class StreamRunner:
    """Run one streaming call from connect to a terminal state."""

    def __init__(
        self,
        *,
        provider: str,
        model: Optional[str],
        token: CancellationToken,
        logger: logging.Logger,
        ctx: Optional[LogContext] = None,
    ) -> None:
        self.provider = provider
        self.model = model
        self.token = token
        self.state = StreamState.IDLE
        self.metrics = StreamMetrics()
        self._logger = logger
        self._ctx = ctx or LogContext(provider=provider, model=model)
        self._t0 = 0.0

    def run(
        self,
        starter: Callable[[], Iterable[Any]],
        translate: Callable[[Any], Iterable[StreamChunk]],
        sink: Sink,
    ) -> StreamState:
        """Drive the stream and return its terminal state.

        Returns:
            ``StreamState.COMPLETED`` or ``StreamState.CANCELLED``.

        Raises:
            ProviderError: the single translated failure (``FAILED`` state).
            Exception: whatever ``sink`` raises, unchanged.
        """
        self._t0 = time.perf_counter()
        self.state = StreamState.CONNECTING
        log_event(self._logger, "stream.start", self._ctx)
        if self.token.cancelled:
            return self._finish(StreamState.CANCELLED)
        try:
            source = starter()
        except CancelledError:
            return self._finish(StreamState.CANCELLED)
        except Exception as exc:
            if self.token.cancelled:
                return self._finish(StreamState.CANCELLED)
            raise self._fail(exc)

        self.state = StreamState.STREAMING
        try:
            return self._pump(iter(source), translate, sink)
        finally:
            close = getattr(source, "close", None)
            if callable(close):
                with suppress(Exception):
                    close()

    def _pump(self, iterator, translate, sink) -> StreamState:
        while True:
            if self.token.cancelled:
                return self._finish(StreamState.CANCELLED)
            try:
                event = next(iterator)
            except StopIteration:
                break
            except CancelledError:
                return self._finish(StreamState.CANCELLED)
            except Exception as exc:
                if self.token.cancelled:
                    return self._finish(StreamState.CANCELLED)
                raise self._fail(exc)
            try:
                chunks = list(translate(event))
            except ProviderError as exc:
                raise self._fail(exc)
            except Exception as exc:
                decode_error = UpstreamDecodeError(
                    code=ErrorCode.DECODE,
                    message=f"{self.provider} stream event could not be translated: {exc}",
                    provider=self.provider,
                    model=self.model,
                    raw=exc,
                )
                decode_error.__cause__ = exc
                raise self._fail(decode_error)
            for chunk in chunks:
                if not self._deliver(sink, chunk):
                    return self._finish(StreamState.CANCELLED)
        if self.token.cancelled:
            return self._finish(StreamState.CANCELLED)
        return self._finish(StreamState.COMPLETED)

    def _deliver(self, sink: Sink, chunk: StreamChunk) -> bool:
        try:
            delivered = self.token.deliver(sink, chunk)
        except Exception:
            self.state = StreamState.FAILED
            self._log_finalize(error_code="sink_error")
            raise
        if delivered:
            if self.metrics.emitted == 0:
                self.metrics.time_to_first_chunk_ms = (time.perf_counter() - self._t0) * 1000.0
            self.metrics.emitted += 1
        return delivered

    def _fail(self, exc: BaseException) -> ProviderError:
        error = wrap_upstream_error(exc, provider=self.provider, model=self.model, action="stream")
        if error is not exc:
            error.__cause__ = exc
        self.state = StreamState.FAILED
        self._log_finalize(error_code=error.code.value)
        return error

    def _finish(self, state: StreamState) -> StreamState:
        self.state = state
        self._log_finalize()
        return state

    def _log_finalize(self, error_code: Optional[str] = None) -> None:
        self.metrics.total_duration_ms = (time.perf_counter() - self._t0) * 1000.0
        log_event(
            self._logger,
            "stream.finalize",
            self._ctx,
            level=logging.WARNING if error_code else logging.INFO,
            state=self.state.value,
            error_code=error_code,
            **self.metrics.to_dict(),
        )


__all__ = ["StreamRunner", "Sink"]
