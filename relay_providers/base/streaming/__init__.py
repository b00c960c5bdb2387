"""Streaming package: frame parsing, tool-call reconstruction and the stream driver."""

from .accumulate import accumulate_chunks
from .frame_parser import DONE_SENTINEL, FrameParser, iter_sse_payloads
from .stream_runner import Sink, StreamRunner
from .stream_state import StreamState
from .streaming_metrics import StreamMetrics
from .tool_calls import (
    EMPTY_ARGUMENTS,
    FragmentToolCallTracker,
    IndexedToolCallTracker,
    MergedToolCallTracker,
    ToolCallAssembler,
)

__all__ = [
    "accumulate_chunks",
    "DONE_SENTINEL",
    "FrameParser",
    "iter_sse_payloads",
    "Sink",
    "StreamRunner",
    "StreamState",
    "StreamMetrics",
    "EMPTY_ARGUMENTS",
    "FragmentToolCallTracker",
    "IndexedToolCallTracker",
    "MergedToolCallTracker",
    "ToolCallAssembler",
]
