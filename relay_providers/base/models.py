"""Canonical request/response/chunk model (public facade)."""

from .models_parts import (
    ROLES,
    ChatRequest,
    ChatResponse,
    Message,
    ModelDescriptor,
    Role,
    StreamChunk,
    StreamDelta,
    Tool,
    ToolCall,
    ToolCallDelta,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "Message",
    "Role",
    "ROLES",
    "ModelDescriptor",
    "StreamChunk",
    "StreamDelta",
    "Tool",
    "ToolCall",
    "ToolCallDelta",
]
