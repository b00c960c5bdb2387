"""
Message type used across adapters.

Messages are immutable once built; their order within a request defines the
conversation order sent upstream.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Literal, Optional

from .tool import ToolCall

# Message roles understood by every adapter.
Role = Literal["system", "user", "assistant"]

ROLES: tuple[str, ...] = ("system", "user", "assistant")


@dataclass(frozen=True)
class Message:
    """A single chat message.

    Attributes:
        role: Author role (``"system"``, ``"user"`` or ``"assistant"``).
        content: Plain text content.
        tool_calls: Tool invocations issued by an assistant message.
        tool_results: Opaque tool results attached to the message. Mapping
            entries carrying ``tool_call_id`` are understood by OpenAI-style
            and Anthropic adapters; other shapes are passed through.
    """

    role: Role
    content: str = ""
    tool_calls: Optional[List[ToolCall]] = None
    tool_results: Optional[Any] = None


__all__ = ["Message", "Role", "ROLES"]
