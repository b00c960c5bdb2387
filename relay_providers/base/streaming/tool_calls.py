"""Tool-call delta reconstruction.

Providers deliver tool-call arguments in three shapes; each tracker below
turns one shape into canonical :class:`ToolCallDelta` values:

``FragmentToolCallTracker``
    OpenAI-style ``tool_calls`` deltas. A call is introduced by an entry
    carrying ``id`` and ``function.name``; later entries for the same
    ``index`` carry raw argument fragments that are forwarded verbatim.

``IndexedToolCallTracker``
    Start/continue events where continuations are tied to the start by
    position (Anthropic content block index), not by a repeated id.

``MergedToolCallTracker``
    Each tick carries an object with only the new fields. The tracker merges
    into a running accumulator and re-emits the whole object with
    ``cumulative=True``.

``ToolCallAssembler`` consumes deltas of any shape and produces final
:class:`ToolCall` values with complete JSON arguments.

Every tracker is per streaming call; adapters create fresh ones for each
``send_streaming`` invocation.
"""
from __future__ import annotations

import json
import time
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Set

from ..errors import ErrorCode, UpstreamDecodeError
from ..models import ToolCall, ToolCallDelta

EMPTY_ARGUMENTS = "{}"


class FragmentToolCallTracker:
    """Map OpenAI-style ``delta.tool_calls`` entries to canonical deltas.

    Entries are keyed by ``index``. Several calls may be open at once (parallel
    tool calls); each index keeps its own id.
    """

    def __init__(self) -> None:
        self._ids: Dict[int, str] = {}

    def translate(self, entries: Iterable[Mapping[str, Any]]) -> List[ToolCallDelta]:
        """Translate one chunk's tool-call entries, preserving their order."""
        out: List[ToolCallDelta] = []
        for position, entry in enumerate(entries):
            raw_index = entry.get("index")
            index = raw_index if isinstance(raw_index, int) else position
            function = entry.get("function") or {}
            call_id = entry.get("id")
            if call_id and self._ids.get(index) != call_id:
                self._ids[index] = call_id
                out.append(ToolCallDelta(id=call_id, name=function.get("name") or "", arguments_json=EMPTY_ARGUMENTS))
            elif index not in self._ids:
                # A continuation for an index never introduced; give it a stable id.
                self._ids[index] = f"call_{index}"
                out.append(
                    ToolCallDelta(id=self._ids[index], name=function.get("name") or "", arguments_json=EMPTY_ARGUMENTS)
                )
            fragment = function.get("arguments")
            if fragment:
                out.append(ToolCallDelta(id=self._ids[index], arguments_json=fragment))
        return out


class IndexedToolCallTracker:
    """Track calls opened by start events and continued by position.

    A start for a new block index opens a call without closing earlier ones;
    continuations resolve their id through the block index they arrive on.
    """

    def __init__(self) -> None:
        self._open: Dict[int, str] = {}

    @property
    def open_ids(self) -> List[str]:
        return list(self._open.values())

    def open(self, index: int, call_id: str, name: str) -> ToolCallDelta:
        self._open[index] = call_id
        return ToolCallDelta(id=call_id, name=name, arguments_json=EMPTY_ARGUMENTS)

    def append(self, index: int, fragment: str) -> Optional[ToolCallDelta]:
        """Return a continuation for the call open at ``index``.

        ``None`` when no call is open there or the fragment is empty.
        """
        call_id = self._open.get(index)
        if call_id is None or not fragment:
            return None
        return ToolCallDelta(id=call_id, arguments_json=fragment)

    def close(self, index: int) -> None:
        self._open.pop(index, None)


def _timestamp_id() -> str:
    return f"call-{int(time.time() * 1000)}"


class MergedToolCallTracker:
    """Accumulate merged-object argument ticks for one open call at a time.

    A tick whose name (or explicit id) differs from the open call closes it and
    opens a new one with a fresh accumulator.
    Generated ids are unique for the life of the tracker, across ``close``.
    """

    def __init__(self, id_factory: Callable[[], str] = _timestamp_id) -> None:
        self._id_factory = id_factory
        self._call_id: Optional[str] = None
        self._name: Optional[str] = None
        self._accumulator: Dict[str, Any] = {}
        self._issued: Set[str] = set()

    @property
    def open_id(self) -> Optional[str]:
        return self._call_id

    def update(self, name: str, args: Optional[Mapping[str, Any]], call_id: Optional[str] = None) -> List[ToolCallDelta]:
        """Merge ``args`` into the open call, opening one first if needed."""
        out: List[ToolCallDelta] = []
        switching = self._call_id is not None and (
            (call_id is not None and call_id != self._call_id) or (name and name != self._name)
        )
        if self._call_id is None or switching:
            self._call_id = call_id or self._fresh_id()
            self._issued.add(self._call_id)
            self._name = name
            self._accumulator = {}
            out.append(ToolCallDelta(id=self._call_id, name=name, arguments_json=EMPTY_ARGUMENTS))
        if args:
            self._accumulator.update(args)
            out.append(
                ToolCallDelta(id=self._call_id, arguments_json=json.dumps(self._accumulator), cumulative=True)
            )
        return out

    def close(self) -> None:
        self._call_id = None
        self._name = None
        self._accumulator = {}

    def _fresh_id(self) -> str:
        candidate = self._id_factory()
        # Timestamp ids collide when several calls open in the same millisecond.
        suffix = 1
        unique = candidate
        while unique in self._issued:
            unique = f"{candidate}-{suffix}"
            suffix += 1
        return unique


class ToolCallAssembler:
    """Reassemble :class:`ToolCallDelta` streams into complete tool calls.

    Fragments are concatenated per id in arrival order; cumulative deltas
    replace what was gathered so far. Calls are returned in first-seen order.
    """

    def __init__(self, *, provider: str = "unknown") -> None:
        self._provider = provider
        self._order: List[str] = []
        self._names: Dict[str, str] = {}
        self._buffers: Dict[str, List[str]] = {}

    def feed(self, delta: ToolCallDelta) -> None:
        if delta.id not in self._buffers:
            self._order.append(delta.id)
            self._buffers[delta.id] = []
            self._names[delta.id] = ""
        if delta.is_start:
            self._names[delta.id] = delta.name or self._names[delta.id]
            return
        if delta.cumulative:
            self._buffers[delta.id] = [delta.arguments_json]
        else:
            self._buffers[delta.id].append(delta.arguments_json)

    def feed_all(self, deltas: Iterable[ToolCallDelta]) -> None:
        for delta in deltas:
            self.feed(delta)

    def result(self) -> List[ToolCall]:
        """Return the assembled calls.

        Raises:
            UpstreamDecodeError: if any call's arguments are not valid JSON.
        """
        calls: List[ToolCall] = []
        for call_id in self._order:
            arguments = "".join(self._buffers[call_id]) or EMPTY_ARGUMENTS
            try:
                json.loads(arguments)
            except ValueError as exc:
                raise UpstreamDecodeError(
                    code=ErrorCode.DECODE,
                    message=f"tool call {call_id} has incomplete arguments JSON: {exc}",
                    provider=self._provider,
                    raw=exc,
                ) from exc
            calls.append(ToolCall(id=call_id, name=self._names[call_id], arguments_json=arguments))
        return calls


__all__ = [
    "EMPTY_ARGUMENTS",
    "FragmentToolCallTracker",
    "IndexedToolCallTracker",
    "MergedToolCallTracker",
    "ToolCallAssembler",
]
