"""Gemini stream translation.

Each streamed ``GenerateContentResponse`` may carry text parts and
``function_call`` parts. Function-call arguments arrive as objects holding
only the fields known so far; :class:`MergedToolCallTracker` merges them and
re-emits the full arguments as cumulative deltas.

Merging only spans responses: each further ``function_call`` part inside one
response starts a new call, even when it repeats the previous name.
"""

from __future__ import annotations

from typing import Any, List

from ..base.models import StreamChunk, StreamDelta, ToolCallDelta
from ..base.openai_style_parts import as_dict
from ..base.streaming import MergedToolCallTracker
from ..config.defaults import GEMINI_STREAM_FALLBACK_ID
from .helpers import candidate_parts


class GeminiChunkTranslator:
    """Per-call translator for ``generate_content_stream`` responses."""

    def __init__(self, tracker: MergedToolCallTracker | None = None) -> None:
        self._tracker = tracker or MergedToolCallTracker()

    def __call__(self, response: Any) -> List[StreamChunk]:
        body = as_dict(response)
        text: List[str] = []
        deltas: List[ToolCallDelta] = []
        calls_seen = 0
        for part in candidate_parts(body):
            if part.get("text") and not part.get("thought"):
                text.append(part["text"])
            call = part.get("function_call")
            if call:
                # Separate parts within one response are separate calls.
                if calls_seen:
                    self._tracker.close()
                calls_seen += 1
                deltas.extend(self._tracker.update(call.get("name") or "", call.get("args"), call.get("id")))
        if not text and not deltas:
            return []
        return [
            StreamChunk(
                id=GEMINI_STREAM_FALLBACK_ID,
                delta=StreamDelta(content="".join(text) or None, tool_calls=deltas or None),
            )
        ]


__all__ = ["GeminiChunkTranslator"]
