"""Canonical single-shot response."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .message import Message
from .tool import ToolCall


@dataclass(frozen=True)
class ChatResponse:
    """Result of one ``send`` call; ``message.role`` is always ``"assistant"``."""

    id: str
    message: Message
    tool_calls: Optional[List[ToolCall]] = None

    @property
    def text(self) -> str:
        return self.message.content


__all__ = ["ChatResponse"]
