"""Validation DTOs for inbound adapter requests."""

from .chat import ChatRequestDTO, MessageDTO, ToolCallDTO, ToolDTO, validate_request

__all__ = [
    "ChatRequestDTO",
    "MessageDTO",
    "ToolCallDTO",
    "ToolDTO",
    "validate_request",
]
