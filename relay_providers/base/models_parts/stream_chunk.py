"""
Streaming chunk types.

A ``ToolCallDelta`` is either a first sighting of a call (``name`` set,
``arguments_json == "{}"``) or a continuation for an id seen earlier. A
continuation normally carries a fragment to append; when ``cumulative`` is
``True`` it carries the complete arguments so far and replaces previous
content for that id.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class ToolCallDelta:
    """Incremental tool-call information for a single call id."""

    id: str
    arguments_json: str
    name: Optional[str] = None
    cumulative: bool = False

    @property
    def is_start(self) -> bool:
        return self.name is not None


@dataclass(frozen=True)
class StreamDelta:
    """Incremental content of one chunk: text, tool-call deltas, or both."""

    content: Optional[str] = None
    tool_calls: Optional[List[ToolCallDelta]] = None


@dataclass(frozen=True)
class StreamChunk:
    """One unit delivered to a streaming sink."""

    id: str
    delta: StreamDelta


__all__ = ["ToolCallDelta", "StreamDelta", "StreamChunk"]
