"""Lifecycle states of one streaming call."""
from __future__ import annotations

from enum import Enum


class StreamState(str, Enum):
    """``idle -> connecting -> streaming -> completed | cancelled | failed``."""

    IDLE = "idle"
    CONNECTING = "connecting"
    STREAMING = "streaming"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (StreamState.COMPLETED, StreamState.CANCELLED, StreamState.FAILED)


__all__ = ["StreamState"]
