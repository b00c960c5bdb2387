"""Timeout configuration shared by HTTP and SDK transports.

``get_timeout_config()`` returns a process-cached :class:`TimeoutConfig`,
parsing environment overrides on first use only. Supported variables (all
optional, positive floats):

    RELAY_TIMEOUT_START_SECONDS    connection / stream start
    RELAY_TIMEOUT_STREAM_SECONDS   idle gap between streamed bytes
    RELAY_TIMEOUT_HTTP_SECONDS     whole non-streaming request

Invalid values are ignored in favour of the defaults. There are no ad-hoc
timeout literals elsewhere in the package.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from threading import Lock

import httpx


@dataclass(frozen=True)
class TimeoutConfig:
    """Normalized timeout values in seconds."""

    start_timeout_seconds: float = 30.0
    stream_timeout_seconds: float = 60.0
    http_timeout_seconds: float = 60.0

    def to_httpx(self) -> httpx.Timeout:
        """Return an ``httpx.Timeout`` applying these values.

        ``connect`` uses the start timeout, ``read`` the stream idle timeout so
        long-running streams are not cut while bytes keep arriving.
        """
        return httpx.Timeout(
            self.http_timeout_seconds,
            connect=self.start_timeout_seconds,
            read=self.stream_timeout_seconds,
        )


_CACHED: TimeoutConfig | None = None
_LOCK = Lock()


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the cached timeout configuration, building it on first call."""
    global _CACHED
    if _CACHED is not None:
        return _CACHED
    with _LOCK:
        if _CACHED is None:
            defaults = TimeoutConfig()
            _CACHED = TimeoutConfig(
                start_timeout_seconds=_env_float("RELAY_TIMEOUT_START_SECONDS", defaults.start_timeout_seconds),
                stream_timeout_seconds=_env_float("RELAY_TIMEOUT_STREAM_SECONDS", defaults.stream_timeout_seconds),
                http_timeout_seconds=_env_float("RELAY_TIMEOUT_HTTP_SECONDS", defaults.http_timeout_seconds),
            )
        return _CACHED


def reset_timeout_config() -> None:
    """Drop the cached configuration so the next call re-reads the environment."""
    global _CACHED
    with _LOCK:
        _CACHED = None


__all__ = ["TimeoutConfig", "get_timeout_config", "reset_timeout_config"]
