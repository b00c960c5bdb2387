"""
Canonical chat request.

Validation (non-empty messages, temperature range, role set) is performed by
``relay_providers.base.dto.validate_request`` before an adapter contacts
upstream, keeping this type a plain container.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .message import Message
from .tool import Tool


@dataclass(frozen=True)
class ChatRequest:
    """Provider-agnostic completion request.

    Attributes:
        model: Target model identifier.
        messages: Ordered, non-empty conversation.
        temperature: Optional sampling temperature in ``[0, 2]``.
        max_output_tokens: Optional cap on generated tokens.
        tools: Optional tools the model may call.
        stream: Whether the caller intends to stream. ``send`` refuses
            streaming requests; ``send_streaming`` forces this on.
    """

    model: str
    messages: List[Message]
    temperature: Optional[float] = None
    max_output_tokens: Optional[int] = None
    tools: Optional[List[Tool]] = None
    stream: bool = False

    def system_text(self) -> Optional[str]:
        """Return all system message contents joined by blank lines, or ``None``."""
        parts = [m.content for m in self.messages if m.role == "system" and m.content]
        return "\n\n".join(parts) if parts else None


__all__ = ["ChatRequest"]
