"""Replay a chunk sequence into a single response."""
from __future__ import annotations

from typing import Iterable

from ...config.defaults import STREAM_FALLBACK_ID
from ..models import ChatResponse, Message, StreamChunk
from .tool_calls import ToolCallAssembler


def accumulate_chunks(chunks: Iterable[StreamChunk], *, provider: str = "unknown") -> ChatResponse:
    """Fold streamed chunks into the ``ChatResponse`` a single-shot call would return.

    Text deltas are concatenated in order; tool-call deltas go through
    :class:`ToolCallAssembler`, so the result's ``arguments_json`` values are
    complete JSON (or an ``UpstreamDecodeError`` is raised).
    """
    response_id = None
    text_parts: list[str] = []
    assembler = ToolCallAssembler(provider=provider)
    for chunk in chunks:
        if response_id is None and chunk.id:
            response_id = chunk.id
        if chunk.delta.content:
            text_parts.append(chunk.delta.content)
        if chunk.delta.tool_calls:
            assembler.feed_all(chunk.delta.tool_calls)
    tool_calls = assembler.result()
    return ChatResponse(
        id=response_id or STREAM_FALLBACK_ID,
        message=Message(role="assistant", content="".join(text_parts)),
        tool_calls=tool_calls or None,
    )


__all__ = ["accumulate_chunks"]
