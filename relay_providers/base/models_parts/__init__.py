"""Canonical model parts; import from ``relay_providers.base.models``."""

from .chat_request import ChatRequest
from .chat_response import ChatResponse
from .message import ROLES, Message, Role
from .model_descriptor import ModelDescriptor
from .stream_chunk import StreamChunk, StreamDelta, ToolCallDelta
from .tool import Tool, ToolCall

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "Message",
    "Role",
    "ROLES",
    "ModelDescriptor",
    "StreamChunk",
    "StreamDelta",
    "ToolCallDelta",
    "Tool",
    "ToolCall",
]
