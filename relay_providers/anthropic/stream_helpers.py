"""Anthropic streaming event translation.

The Messages stream announces each content block with
``content_block_start`` (carrying a ``tool_use`` id and name for tool
calls), then sends ``content_block_delta`` events that refer to the block
only by ``index``. :class:`AnthropicEventTranslator` keeps the
index -> call id map so every continuation it emits carries the right id.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from ..base.errors import ErrorCode, UpstreamTransportError
from ..base.models import StreamChunk, StreamDelta, ToolCallDelta
from ..base.openai_style_parts import as_dict
from ..base.streaming import IndexedToolCallTracker
from ..config.defaults import STREAM_FALLBACK_ID


class AnthropicEventTranslator:
    """Per-call translator from Messages stream events to canonical chunks."""

    def __init__(self, *, provider: str = "anthropic") -> None:
        self._provider = provider
        self._message_id: Optional[str] = None
        self._tracker = IndexedToolCallTracker()

    def _chunk(self, content: Optional[str] = None, tool_call: Optional[ToolCallDelta] = None) -> StreamChunk:
        return StreamChunk(
            id=self._message_id or STREAM_FALLBACK_ID,
            delta=StreamDelta(content=content, tool_calls=[tool_call] if tool_call else None),
        )

    def __call__(self, event: Any) -> List[StreamChunk]:
        data = as_dict(event)
        kind = data.get("type")
        index = data.get("index", 0)
        if kind == "message_start":
            message = data.get("message") or {}
            self._message_id = message.get("id") or self._message_id
            return []
        if kind == "content_block_start":
            return self._on_block_start(index, data.get("content_block") or {})
        if kind == "content_block_delta":
            return self._on_block_delta(index, data.get("delta") or {})
        if kind == "content_block_stop":
            self._tracker.close(index)
            return []
        if kind == "error":
            error = data.get("error") or {}
            detail = error.get("message") if isinstance(error, Mapping) else error
            raise UpstreamTransportError(
                code=ErrorCode.UNAVAILABLE if "overloaded" in str(detail).lower() else ErrorCode.SERVER_ERROR,
                message=f"{self._provider} stream reported an error: {detail}",
                provider=self._provider,
            )
        # ping, message_delta, message_stop
        return []

    def _on_block_start(self, index: int, block: Mapping[str, Any]) -> List[StreamChunk]:
        if block.get("type") == "tool_use":
            start = self._tracker.open(index, block.get("id") or f"call_{index}", block.get("name") or "")
            return [self._chunk(tool_call=start)]
        text = block.get("text")
        return [self._chunk(content=text)] if block.get("type") == "text" and text else []

    def _on_block_delta(self, index: int, delta: Mapping[str, Any]) -> List[StreamChunk]:
        kind = delta.get("type")
        if kind == "text_delta":
            text = delta.get("text")
            return [self._chunk(content=text)] if text else []
        if kind == "input_json_delta":
            continuation = self._tracker.append(index, delta.get("partial_json") or "")
            return [self._chunk(tool_call=continuation)] if continuation else []
        return []


__all__ = ["AnthropicEventTranslator"]
