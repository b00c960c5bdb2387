"""Streaming metrics collected by :class:`StreamRunner`."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass
class StreamMetrics:
    """Per-call counters reported in the ``stream.finalize`` event.

    Attributes:
        emitted: Number of chunks delivered to the sink.
        time_to_first_chunk_ms: Latency from start to the first delivery.
        total_duration_ms: Wall time from start to the terminal state.
    """

    emitted: int = 0
    time_to_first_chunk_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["StreamMetrics"]
