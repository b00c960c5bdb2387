"""
Response and stream translation for OpenAI-compatible payloads.

Both functions operate on plain dicts: HTTP adapters pass decoded JSON,
the SDK adapter passes ``model_dump()`` output, so one translation covers
every OpenAI-shaped provider.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional

from ..errors import ErrorCode, UpstreamDecodeError, UpstreamTransportError
from ..models import ChatResponse, Message, StreamChunk, StreamDelta, ToolCall
from ..streaming import EMPTY_ARGUMENTS, FragmentToolCallTracker


def as_dict(obj: Any) -> Dict[str, Any]:
    """Return ``obj`` as a plain dict (pydantic models are dumped)."""
    if isinstance(obj, Mapping):
        return dict(obj)
    dump = getattr(obj, "model_dump", None)
    if callable(dump):
        return dump()
    raise TypeError(f"cannot translate {type(obj).__name__} into a dict")


def _tool_calls_from_message(message: Mapping[str, Any]) -> List[ToolCall]:
    calls: List[ToolCall] = []
    for position, raw in enumerate(message.get("tool_calls") or []):
        function = raw.get("function") or {}
        arguments = function.get("arguments")
        if isinstance(arguments, (dict, list)):
            arguments = json.dumps(arguments)
        calls.append(
            ToolCall(
                id=raw.get("id") or f"call_{position}",
                name=function.get("name") or "",
                arguments_json=arguments or EMPTY_ARGUMENTS,
            )
        )
    return calls


def parse_completion(data: Any, *, provider: str, fallback_id: str, model: Optional[str] = None) -> ChatResponse:
    """Translate a chat completion body into a :class:`ChatResponse`.

    Raises:
        UpstreamDecodeError: when the body has no ``choices[0].message``.
    """
    body = as_dict(data)
    choices = body.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], Mapping):
        raise UpstreamDecodeError(
            code=ErrorCode.DECODE,
            message=f"{provider} response has no choices",
            provider=provider,
            model=model,
        )
    message = choices[0].get("message") or {}
    tool_calls = _tool_calls_from_message(message)
    return ChatResponse(
        id=body.get("id") or fallback_id,
        message=Message(role="assistant", content=message.get("content") or ""),
        tool_calls=tool_calls or None,
    )


class OpenAIChunkTranslator:
    """Per-call translator from completion chunks to canonical chunks.

    Text deltas and tool-call deltas of a chunk are emitted in one
    :class:`StreamChunk` so their relative order is preserved. Chunks with
    neither (role-only or usage-only frames) produce nothing.
    """

    def __init__(self, *, provider: str, fallback_id: str) -> None:
        self._provider = provider
        self._fallback_id = fallback_id
        self._tracker = FragmentToolCallTracker()

    def __call__(self, event: Any) -> List[StreamChunk]:
        data = as_dict(event)
        error = data.get("error")
        if error:
            detail = error.get("message") if isinstance(error, Mapping) else error
            raise UpstreamTransportError(
                code=ErrorCode.SERVER_ERROR,
                message=f"{self._provider} stream reported an error: {detail}",
                provider=self._provider,
            )
        choices = data.get("choices") or []
        if not choices:
            return []
        delta = choices[0].get("delta") or {}
        content = delta.get("content") or None
        tool_deltas = self._tracker.translate(delta.get("tool_calls") or [])
        if content is None and not tool_deltas:
            return []
        return [
            StreamChunk(
                id=data.get("id") or self._fallback_id,
                delta=StreamDelta(content=content, tool_calls=tool_deltas or None),
            )
        ]


__all__ = ["as_dict", "parse_completion", "OpenAIChunkTranslator"]
