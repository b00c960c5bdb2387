"""Gemini request building and response parsing for ``google-genai``.

Requests are plain dicts accepted by ``client.models.generate_content``:
``contents`` is a list of ``{"role", "parts"}`` and ``config`` carries the
system instruction, generation limits, tools and safety settings.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional

from ..base.errors import ErrorCode, UpstreamDecodeError
from ..base.models import ChatRequest, ChatResponse, Message, Tool, ToolCall
from ..config.defaults import (
    DEFAULT_MAX_OUTPUT_TOKENS,
    DEFAULT_TEMPERATURE,
    GEMINI_HARM_CATEGORIES,
    GEMINI_RESPONSE_FALLBACK_ID,
    GEMINI_SAFETY_THRESHOLD,
)


def map_role(role: str) -> str:
    return "model" if role == "assistant" else "user"


def safety_settings() -> List[Dict[str, str]]:
    return [{"category": c, "threshold": GEMINI_SAFETY_THRESHOLD} for c in GEMINI_HARM_CATEGORIES]


def tools_to_gemini(tools: List[Tool]) -> List[Dict[str, Any]]:
    """Group every tool into a single ``function_declarations`` entry."""
    declarations = []
    for tool in tools:
        declaration: Dict[str, Any] = {"name": tool.name, "description": tool.description}
        if tool.parameter_schema:
            declaration["parameters"] = tool.parameter_schema
        declarations.append(declaration)
    return [{"function_declarations": declarations}]


def _function_call_part(call: ToolCall) -> Dict[str, Any]:
    try:
        args = json.loads(call.arguments_json or "{}")
    except ValueError:
        args = {}
    return {"function_call": {"id": call.id, "name": call.name, "args": args}}


def _function_response_parts(results: Any) -> List[Dict[str, Any]]:
    items = results if isinstance(results, list) else [results]
    parts: List[Dict[str, Any]] = []
    for item in items:
        if not isinstance(item, Mapping) or not item.get("tool_call_id"):
            continue
        parts.append(
            {
                "function_response": {
                    "id": item["tool_call_id"],
                    "name": item.get("name") or item["tool_call_id"],
                    "response": {"content": item.get("content", "")},
                }
            }
        )
    return parts


def _parts_for(message: Message) -> List[Dict[str, Any]]:
    parts: List[Dict[str, Any]] = []
    if message.content:
        parts.append({"text": message.content})
    parts.extend(_function_call_part(c) for c in message.tool_calls or [])
    if message.tool_results is not None:
        parts.extend(_function_response_parts(message.tool_results))
    return parts or [{"text": ""}]


def build_contents(messages: List[Message]) -> List[Dict[str, Any]]:
    return [{"role": map_role(m.role), "parts": _parts_for(m)} for m in messages if m.role != "system"]


def build_config(request: ChatRequest) -> Dict[str, Any]:
    config: Dict[str, Any] = {
        "temperature": request.temperature if request.temperature is not None else DEFAULT_TEMPERATURE,
        "max_output_tokens": request.max_output_tokens or DEFAULT_MAX_OUTPUT_TOKENS,
        "safety_settings": safety_settings(),
    }
    system = request.system_text()
    if system:
        config["system_instruction"] = system
    if request.tools:
        config["tools"] = tools_to_gemini(request.tools)
    return config


def candidate_parts(body: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    """Return the parts of the first candidate, or an empty list."""
    candidates = body.get("candidates") or []
    if not candidates:
        return []
    content = candidates[0].get("content") or {}
    return content.get("parts") or []


def parse_response(body: Mapping[str, Any], *, provider: str, model: Optional[str] = None) -> ChatResponse:
    """Translate a ``GenerateContentResponse`` dump into a ``ChatResponse``.

    Function calls without an SDK-supplied id are numbered ``call-<i>``.
    """
    if not body.get("candidates"):
        feedback = body.get("prompt_feedback") or {}
        reason = feedback.get("block_reason") if isinstance(feedback, Mapping) else None
        raise UpstreamDecodeError(
            code=ErrorCode.DECODE,
            message=f"{provider} returned no candidates" + (f" (blocked: {reason})" if reason else ""),
            provider=provider,
            model=model,
        )
    text: List[str] = []
    calls: List[ToolCall] = []
    for part in candidate_parts(body):
        if part.get("text") and not part.get("thought"):
            text.append(part["text"])
        call = part.get("function_call")
        if call:
            calls.append(
                ToolCall(
                    id=call.get("id") or f"call-{len(calls)}",
                    name=call.get("name") or "",
                    arguments_json=json.dumps(call.get("args") or {}),
                )
            )
    return ChatResponse(
        id=body.get("response_id") or GEMINI_RESPONSE_FALLBACK_ID,
        message=Message(role="assistant", content="".join(text)),
        tool_calls=calls or None,
    )


__all__ = [
    "map_role",
    "safety_settings",
    "tools_to_gemini",
    "build_contents",
    "build_config",
    "candidate_parts",
    "parse_response",
]
