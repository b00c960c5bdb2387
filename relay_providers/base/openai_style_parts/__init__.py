"""Shared pieces for OpenAI-shaped providers (payloads, translation, HTTP base)."""

from .payload import build_chat_payload, build_messages, message_to_openai, tool_call_to_openai, tool_to_openai
from .translate import OpenAIChunkTranslator, as_dict, parse_completion

__all__ = [
    "build_chat_payload",
    "build_messages",
    "message_to_openai",
    "tool_call_to_openai",
    "tool_to_openai",
    "OpenAIChunkTranslator",
    "as_dict",
    "parse_completion",
]
