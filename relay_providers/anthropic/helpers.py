"""Anthropic Messages API marshalling.

Pure functions translating canonical requests into ``messages.create``
parameters and ``Message`` bodies back into ``ChatResponse`` values.

Role mapping: system messages are lifted into the top-level ``system``
parameter (the Messages API has no system role); ``assistant`` stays
``assistant``; everything else is sent as ``user``.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional

from ..base.errors import ErrorCode, UpstreamDecodeError
from ..base.models import ChatRequest, ChatResponse, Message, Tool, ToolCall


def map_role(role: str) -> str:
    return "assistant" if role == "assistant" else "user"


def tool_to_anthropic(tool: Tool) -> Dict[str, Any]:
    return {
        "name": tool.name,
        "description": tool.description,
        "input_schema": tool.parameter_schema or {"type": "object", "properties": {}},
    }


def _tool_use_block(call: ToolCall) -> Dict[str, Any]:
    try:
        arguments = json.loads(call.arguments_json or "{}")
    except ValueError:
        arguments = {}
    return {"type": "tool_use", "id": call.id, "name": call.name, "input": arguments}


def _tool_result_blocks(results: Any) -> List[Dict[str, Any]]:
    items = results if isinstance(results, list) else [results]
    blocks: List[Dict[str, Any]] = []
    for item in items:
        if not isinstance(item, Mapping):
            continue
        if item.get("tool_call_id"):
            blocks.append(
                {
                    "type": "tool_result",
                    "tool_use_id": item["tool_call_id"],
                    "content": item.get("content", ""),
                }
            )
        elif item.get("type") == "tool_result":
            blocks.append(dict(item))
    return blocks


def _content_for(message: Message) -> Any:
    if not message.tool_calls and message.tool_results is None:
        return message.content
    blocks: List[Dict[str, Any]] = []
    if message.tool_results is not None:
        blocks.extend(_tool_result_blocks(message.tool_results))
    if message.content:
        blocks.append({"type": "text", "text": message.content})
    blocks.extend(_tool_use_block(c) for c in message.tool_calls or [])
    return blocks


def build_messages(messages: List[Message]) -> List[Dict[str, Any]]:
    return [
        {"role": map_role(m.role), "content": _content_for(m)}
        for m in messages
        if m.role != "system"
    ]


def build_params(request: ChatRequest, *, default_max_tokens: int) -> Dict[str, Any]:
    """Build keyword arguments for ``client.messages.create``."""
    params: Dict[str, Any] = {
        "model": request.model,
        "messages": build_messages(request.messages),
        "max_tokens": request.max_output_tokens or default_max_tokens,
    }
    system = request.system_text()
    if system:
        params["system"] = system
    if request.temperature is not None:
        params["temperature"] = request.temperature
    if request.tools:
        params["tools"] = [tool_to_anthropic(t) for t in request.tools]
    if request.stream:
        params["stream"] = True
    return params


def parse_message(body: Mapping[str, Any], *, provider: str, model: Optional[str] = None) -> ChatResponse:
    """Translate a Messages API response body.

    Text blocks are concatenated in order; ``tool_use`` blocks become tool
    calls with ``json.dumps(input)`` arguments.
    """
    blocks = body.get("content")
    if not isinstance(blocks, list):
        raise UpstreamDecodeError(
            code=ErrorCode.DECODE,
            message=f"{provider} response has no content blocks",
            provider=provider,
            model=model,
        )
    text: List[str] = []
    calls: List[ToolCall] = []
    for block in blocks:
        kind = block.get("type")
        if kind == "text":
            text.append(block.get("text") or "")
        elif kind == "tool_use":
            calls.append(
                ToolCall(
                    id=block.get("id") or f"call_{len(calls)}",
                    name=block.get("name") or "",
                    arguments_json=json.dumps(block.get("input") or {}),
                )
            )
    return ChatResponse(
        id=body.get("id") or "anthropic-response",
        message=Message(role="assistant", content="".join(text)),
        tool_calls=calls or None,
    )


__all__ = [
    "map_role",
    "tool_to_anthropic",
    "build_messages",
    "build_params",
    "parse_message",
]
