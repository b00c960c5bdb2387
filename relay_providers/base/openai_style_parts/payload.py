"""
Request marshalling for OpenAI-compatible chat completion APIs.

Shared by the OpenAI SDK adapter and the HTTP router adapters (OpenRouter,
Requesty). Functions are pure: they translate canonical types into plain
JSON-ready dicts and perform no I/O.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..models import ChatRequest, Message, Tool, ToolCall


def tool_to_openai(tool: Tool) -> Dict[str, Any]:
    """Map a canonical tool to ``{"type": "function", "function": {...}}``."""
    return {
        "type": "function",
        "function": {
            "name": tool.name,
            "description": tool.description,
            "parameters": tool.parameter_schema or {"type": "object", "properties": {}},
        },
    }


def tool_call_to_openai(call: ToolCall) -> Dict[str, Any]:
    return {
        "id": call.id,
        "type": "function",
        "function": {"name": call.name, "arguments": call.arguments_json},
    }


def _tool_result_messages(results: Any) -> List[Dict[str, Any]]:
    """Expand ``tool_results`` into ``role="tool"`` messages.

    Only mapping entries carrying ``tool_call_id`` are understood; content
    that is not a string is sent as-is and left to the upstream to accept or
    reject.
    """
    items = results if isinstance(results, list) else [results]
    out: List[Dict[str, Any]] = []
    for item in items:
        if isinstance(item, Mapping) and item.get("tool_call_id"):
            out.append(
                {
                    "role": "tool",
                    "tool_call_id": item["tool_call_id"],
                    "content": item.get("content", ""),
                }
            )
    return out


def message_to_openai(message: Message) -> List[Dict[str, Any]]:
    """Map one canonical message to one or more OpenAI-style messages."""
    entry: Dict[str, Any] = {"role": message.role, "content": message.content}
    if message.tool_calls:
        entry["tool_calls"] = [tool_call_to_openai(c) for c in message.tool_calls]
        if not message.content:
            entry["content"] = None
    out = [entry]
    if message.tool_results is not None:
        out.extend(_tool_result_messages(message.tool_results))
    return out


def build_messages(messages: List[Message]) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for message in messages:
        out.extend(message_to_openai(message))
    return out


def build_chat_payload(
    request: ChatRequest,
    *,
    default_temperature: Optional[float] = None,
    default_max_tokens: Optional[int] = None,
) -> Dict[str, Any]:
    """Build the JSON body for ``POST /chat/completions``.

    Parameters:
        request: Canonical request; ``request.stream`` sets ``stream``.
        default_temperature: Used when the request leaves temperature unset.
        default_max_tokens: Used when the request leaves the cap unset.

    Returns:
        A dict with ``model``, ``messages`` and ``stream`` plus whichever of
        ``temperature``, ``max_tokens`` and ``tools`` are known.
    """
    payload: Dict[str, Any] = {
        "model": request.model,
        "messages": build_messages(request.messages),
        "stream": bool(request.stream),
    }
    temperature = request.temperature if request.temperature is not None else default_temperature
    if temperature is not None:
        payload["temperature"] = temperature
    max_tokens = request.max_output_tokens if request.max_output_tokens is not None else default_max_tokens
    if max_tokens is not None:
        payload["max_tokens"] = max_tokens
    if request.tools:
        payload["tools"] = [tool_to_openai(t) for t in request.tools]
    return payload


__all__ = [
    "tool_to_openai",
    "tool_call_to_openai",
    "message_to_openai",
    "build_messages",
    "build_chat_payload",
]
