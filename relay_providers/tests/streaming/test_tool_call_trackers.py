"""Tool-call reconstruction for the three upstream delta shapes."""
from __future__ import annotations

import json

import pytest

from relay_providers.base.errors import UpstreamDecodeError
from relay_providers.base.models import ToolCallDelta
from relay_providers.base.streaming import (
    FragmentToolCallTracker,
    IndexedToolCallTracker,
    MergedToolCallTracker,
    ToolCallAssembler,
)
from relay_providers.base.streaming import tool_calls


def _assemble(deltas):
    assembler = ToolCallAssembler(provider="test")
    assembler.feed_all(deltas)
    return assembler.result()


def test_fragments_forwarded_verbatim_and_reassembled():
    tracker = FragmentToolCallTracker()
    deltas = []
    deltas += tracker.translate([{"index": 0, "id": "call_1", "function": {"name": "get_weather", "arguments": ""}}])
    deltas += tracker.translate([{"index": 0, "function": {"arguments": '{"city"'}}])
    deltas += tracker.translate([{"index": 0, "function": {"arguments": ': "Paris"}'}}])

    assert deltas[0] == ToolCallDelta(id="call_1", name="get_weather", arguments_json="{}")  # nosec B101
    assert [d.arguments_json for d in deltas[1:]] == ['{"city"', ': "Paris"}']  # nosec B101
    assert all(d.id == "call_1" and not d.is_start for d in deltas[1:])  # nosec B101

    (call,) = _assemble(deltas)
    assert call.name == "get_weather"  # nosec B101
    assert json.loads(call.arguments_json) == {"city": "Paris"}  # nosec B101


def test_parallel_fragment_calls_keep_separate_ids():
    tracker = FragmentToolCallTracker()
    deltas = tracker.translate(
        [
            {"index": 0, "id": "a", "function": {"name": "one", "arguments": '{"x":'}},
            {"index": 1, "id": "b", "function": {"name": "two", "arguments": "{}"}},
        ]
    )
    deltas += tracker.translate([{"index": 0, "function": {"arguments": " 1}"}}])
    calls = _assemble(deltas)
    assert [(c.id, c.name, c.arguments_json) for c in calls] == [("a", "one", '{"x": 1}'), ("b", "two", "{}")]  # nosec B101


def test_indexed_tracker_routes_by_block_index():
    tracker = IndexedToolCallTracker()
    start = tracker.open(1, "toolu_1", "search")
    assert start.is_start and start.arguments_json == "{}"  # nosec B101
    first = tracker.append(1, '{"q": ')
    assert first.id == "toolu_1"  # nosec B101
    assert tracker.append(2, "ignored") is None  # nosec B101
    assert tracker.append(1, "") is None  # nosec B101
    second = tracker.append(1, '"relay"}')
    tracker.close(1)
    assert tracker.append(1, "late") is None and tracker.open_ids == []  # nosec B101
    (call,) = _assemble([start, first, second])
    assert json.loads(call.arguments_json) == {"q": "relay"}  # nosec B101


def test_merged_tracker_emits_cumulative_union():
    tracker = MergedToolCallTracker(id_factory=lambda: "call-1")
    deltas = tracker.update("lookup", {"a": 1})
    assert deltas[0] == ToolCallDelta(id="call-1", name="lookup", arguments_json="{}")  # nosec B101
    assert deltas[1].cumulative and json.loads(deltas[1].arguments_json) == {"a": 1}  # nosec B101
    more = tracker.update("lookup", {"b": 2})
    assert len(more) == 1 and json.loads(more[0].arguments_json) == {"a": 1, "b": 2}  # nosec B101
    (call,) = _assemble(deltas + more)
    assert json.loads(call.arguments_json) == {"a": 1, "b": 2}  # nosec B101


def test_merged_tracker_switches_call_on_new_name():
    tracker = MergedToolCallTracker(id_factory=lambda: "call-1")
    deltas = tracker.update("first", {"a": 1})
    deltas += tracker.update("second", {"b": 2})
    assert tracker.open_id == "call-1-1"  # nosec B101
    calls = _assemble(deltas)
    assert [(c.id, c.name) for c in calls] == [("call-1", "first"), ("call-1-1", "second")]  # nosec B101
    assert json.loads(calls[1].arguments_json) == {"b": 2}  # nosec B101


def test_merged_tracker_never_reuses_colliding_ids():
    tracker = MergedToolCallTracker(id_factory=lambda: "call-7")
    deltas = tracker.update("a", {"n": 1})
    deltas += tracker.update("b", {"n": 2})
    tracker.close()
    deltas += tracker.update("c", {"n": 3})
    deltas += tracker.update("a", {"n": 4})
    calls = _assemble(deltas)
    assert [c.id for c in calls] == ["call-7", "call-7-1", "call-7-2", "call-7-3"]  # nosec B101
    assert [json.loads(c.arguments_json)["n"] for c in calls] == [1, 2, 3, 4]  # nosec B101


def test_merged_tracker_default_ids_distinct_within_one_millisecond(monkeypatch):
    monkeypatch.setattr(tool_calls.time, "time", lambda: 1700000000.0)
    tracker = MergedToolCallTracker()
    deltas = tracker.update("a", {"x": 1})
    deltas += tracker.update("b", {"x": 2})
    deltas += tracker.update("c", {"x": 3})
    ids = [c.id for c in _assemble(deltas)]
    assert len(set(ids)) == 3 and ids[0] == "call-1700000000000"  # nosec B101


def test_merged_tracker_uses_explicit_ids():
    tracker = MergedToolCallTracker()
    deltas = tracker.update("f", {"a": 1}, call_id="fc-1")
    deltas += tracker.update("f", {"a": 2}, call_id="fc-2")
    assert [c.id for c in _assemble(deltas)] == ["fc-1", "fc-2"]  # nosec B101


def test_assembler_defaults_and_rejects_incomplete_json():
    assert _assemble([ToolCallDelta(id="x", name="noop", arguments_json="{}")])[0].arguments_json == "{}"  # nosec B101
    with pytest.raises(UpstreamDecodeError):
        _assemble(
            [
                ToolCallDelta(id="x", name="f", arguments_json="{}"),
                ToolCallDelta(id="x", arguments_json='{"cut": '),
            ]
        )
