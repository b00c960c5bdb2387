"""Shared HTTP client pool for frame-based providers.

Adapters that talk to OpenAI-compatible HTTP routers obtain their
``httpx.Client`` from here unless a client is injected. Clients are cached by
``(base_url, purpose)`` and configured from :func:`get_timeout_config` on
first creation. Pooled clients hold no credentials: authorization headers are
sent per request, so adapters with different keys can share a pool entry.

All pooled clients are closed at interpreter exit; tests may call
:func:`close_all_clients` explicitly.
"""

from __future__ import annotations

import atexit
import logging
import threading
from typing import Dict, Optional, Tuple

import httpx

from ..timeouts import get_timeout_config

_CLIENTS: Dict[Tuple[Optional[str], str], httpx.Client] = {}
_LOCK = threading.RLock()
_logger = logging.getLogger("relay.http")


def get_httpx_client(base_url: Optional[str], purpose: str) -> httpx.Client:
    """Return a pooled ``httpx.Client`` for ``base_url`` and ``purpose``.

    Parameters:
        base_url: API base URL set on the client so callers can use relative
            paths. ``None`` groups clients under a shared key.
        purpose: Short discriminator (``"chat"``, ``"models"``) keeping
            separate pools. Keep stable to maximize reuse.

    Thread-safety:
        Safe for concurrent use; creation is guarded by a re-entrant lock.
    """
    key = (base_url, purpose)
    client = _CLIENTS.get(key)
    if client is not None and not client.is_closed:
        return client

    with _LOCK:
        client = _CLIENTS.get(key)
        if client is not None and not client.is_closed:
            return client
        timeout = get_timeout_config().to_httpx()
        client = httpx.Client(base_url=base_url, timeout=timeout) if base_url else httpx.Client(timeout=timeout)
        _CLIENTS[key] = client
        return client


def close_all_clients() -> None:
    """Close and clear all pooled clients."""
    with _LOCK:
        for client in _CLIENTS.values():
            try:
                client.close()
            except Exception as exc:  # teardown only
                _logger.debug("closing pooled client failed: %s", exc)
        _CLIENTS.clear()


atexit.register(close_all_clients)

__all__ = ["get_httpx_client", "close_all_clients"]
