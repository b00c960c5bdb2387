"""Cooperative cancellation token.

A token is owned by exactly one in-flight adapter call. Cancellation is
observed in two places: transports register close callbacks (so byte reading
stops) and the streaming loop checks the flag before every sink delivery.
Adapters also call :meth:`CancellationToken.raise_if_cancelled` once the
upstream stream is open, so a cancel that lands while connecting ends the
call as cancelled before any event is read.
"""

from __future__ import annotations

import logging
from contextlib import suppress
from threading import RLock
from typing import Any, Callable, TypeVar

from .cancelled_error import CancelledError
from .state import State

T = TypeVar("T")

_logger = logging.getLogger("relay.cancellation")


class CancellationToken:
    """Thread-safe cancellation flag with abort callbacks.

    ``cancel`` may be called from any thread, including from inside a sink
    running on the streaming thread; the internal lock is re-entrant for that
    reason.
    """

    def __init__(self) -> None:
        self._state = State()
        self._lock = RLock()

    @property
    def cancelled(self) -> bool:
        """Whether cancellation has been requested."""
        return self._state.cancelled

    @property
    def reason(self) -> str | None:
        """Reason string supplied at cancel time (if any)."""
        return self._state.reason

    def cancel(self, reason: str | None = None) -> None:
        """Request cancellation and run registered abort callbacks once.

        Idempotent: later calls are no-ops. Callback failures are logged at
        debug level and never propagate, since aborting an already-broken
        transport is expected to fail sometimes.
        """
        with self._lock:
            if self._state.cancelled:
                return
            self._state.cancelled = True
            self._state.reason = reason
            callbacks = list(self._state.callbacks)
            self._state.callbacks.clear()
        for callback in callbacks:
            try:
                callback()
            except Exception as exc:  # abort of a half-closed transport
                _logger.debug("cancellation callback failed: %s", exc)

    def add_callback(self, callback: Callable[[], None]) -> None:
        """Register ``callback`` to run on cancel; runs now if already cancelled."""
        with self._lock:
            if not self._state.cancelled:
                self._state.callbacks.append(callback)
                return
        with suppress(Exception):
            callback()

    def deliver(self, sink: Callable[[T], Any], item: T) -> bool:
        """Invoke ``sink(item)`` unless cancelled; return whether it was invoked.

        The check and the call happen under the token lock, so once
        :meth:`cancel` has returned no further delivery can start.
        """
        with self._lock:
            if self._state.cancelled:
                return False
            sink(item)
            return True

    def raise_if_cancelled(self) -> None:
        """Raise ``CancelledError`` if the token is cancelled."""
        if self._state.cancelled:
            raise CancelledError(self._state.reason or "operation cancelled")

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self._state.cancelled}, reason={self._state.reason!r})"


__all__ = ["CancellationToken"]
