"""Gemini adapter against a fake ``genai.Client``."""
from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any, Dict, List

import pytest

from relay_providers.base.cancellation import CancellationToken, CancelledError
from relay_providers.base.errors import UpstreamDecodeError
from relay_providers.base.models import ChatRequest, Message, StreamChunk, Tool, ToolCall
from relay_providers.base.streaming import MergedToolCallTracker, StreamState, accumulate_chunks
from relay_providers.catalog import ModelCatalog
from relay_providers.gemini import GeminiAdapter
from relay_providers.gemini.stream_helpers import GeminiChunkTranslator


def _response(*parts: Dict[str, Any], response_id: str = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"candidates": [{"content": {"role": "model", "parts": list(parts)}}]}
    if response_id:
        body["response_id"] = response_id
    return body


class FakeModels:
    def __init__(self, result: Any = None, stream: List[Any] = (), listing: List[Any] = ()) -> None:
        self.result = result
        self.stream = list(stream)
        self.listing = list(listing)
        self.calls: List[Dict[str, Any]] = []

    def generate_content(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result

    def generate_content_stream(self, **kwargs: Any):
        self.calls.append(kwargs)
        return iter(self.stream)

    def list(self):
        return iter(self.listing)


def _adapter(**kwargs: Any) -> tuple[GeminiAdapter, FakeModels]:
    catalog = kwargs.pop("catalog", None)
    models = FakeModels(**kwargs)
    return GeminiAdapter("g-key", client=SimpleNamespace(models=models), catalog=catalog), models


def test_provider_name_is_google():
    adapter, _ = _adapter()
    assert adapter.provider == "google"  # nosec B101


def test_send_builds_contents_and_config():
    adapter, models = _adapter(result=_response({"text": "Hi "}, {"text": "there"}, response_id="resp-1"))
    request = ChatRequest(
        model="gemini-2.0-flash",
        messages=[
            Message(role="system", content="Be kind."),
            Message(role="user", content="Hello"),
            Message(role="assistant", content="Hi! How can I help?"),
            Message(role="user", content="Greet me"),
        ],
        tools=[Tool(name="lookup", description="Look up", parameter_schema={"type": "object"})],
    )
    response = adapter.send(request)
    assert response.id == "resp-1" and response.text == "Hi there"  # nosec B101

    (call,) = models.calls
    assert call["model"] == "gemini-2.0-flash"  # nosec B101
    assert [c["role"] for c in call["contents"]] == ["user", "model", "user"]  # nosec B101
    assert call["contents"][0]["parts"] == [{"text": "Hello"}]  # nosec B101
    config = call["config"]
    assert config["system_instruction"] == "Be kind."  # nosec B101
    assert config["temperature"] == 0.7 and config["max_output_tokens"] == 4096  # nosec B101
    assert len(config["safety_settings"]) == 4  # nosec B101
    assert {s["threshold"] for s in config["safety_settings"]} == {"BLOCK_MEDIUM_AND_ABOVE"}  # nosec B101
    assert config["tools"] == [  # nosec B101
        {"function_declarations": [{"name": "lookup", "description": "Look up", "parameters": {"type": "object"}}]}
    ]


def test_send_function_calls_get_positional_ids(hello_request):
    adapter, _ = _adapter(
        result=_response(
            {"function_call": {"name": "lookup", "args": {"q": "a"}}},
            {"function_call": {"id": "fc-9", "name": "lookup", "args": {"q": "b"}}},
        )
    )
    response = adapter.send(hello_request)
    assert response.id == "gemini-response" and response.text == ""  # nosec B101
    assert [c.id for c in response.tool_calls] == ["call-0", "fc-9"]  # nosec B101
    assert json.loads(response.tool_calls[0].arguments_json) == {"q": "a"}  # nosec B101


def test_send_without_candidates_is_decode_error(hello_request):
    adapter, _ = _adapter(result={"candidates": [], "prompt_feedback": {"block_reason": "SAFETY"}})
    with pytest.raises(UpstreamDecodeError) as info:
        adapter.send(hello_request)
    assert "SAFETY" in str(info.value) and str(info.value).startswith("google:")  # nosec B101


def test_tool_history_is_sent_as_function_parts():
    adapter, models = _adapter(result=_response({"text": "It is 18C."}))
    request = ChatRequest(
        model="gemini-2.0-flash",
        messages=[
            Message(role="user", content="Weather?"),
            Message(role="assistant", tool_calls=[ToolCall(id="c1", name="weather", arguments_json='{"city": "Lima"}')]),
            Message(role="user", tool_results=[{"tool_call_id": "c1", "name": "weather", "content": "18C"}]),
        ],
    )
    adapter.send(request)
    contents = models.calls[0]["contents"]
    assert contents[1]["parts"] == [{"function_call": {"id": "c1", "name": "weather", "args": {"city": "Lima"}}}]  # nosec B101
    assert contents[2]["parts"] == [  # nosec B101
        {"function_response": {"id": "c1", "name": "weather", "response": {"content": "18C"}}}
    ]


def test_stream_text_and_merged_arguments(hello_request):
    adapter, _ = _adapter(
        stream=[
            _response({"text": "Looking"}),
            _response({"text": " it up."}, {"function_call": {"name": "lookup", "args": {"q": "x"}}}),
            _response({"function_call": {"name": "lookup", "args": {"limit": 3}}}),
        ]
    )
    chunks: List[StreamChunk] = []
    adapter.send_streaming(hello_request, chunks.append)

    assert {c.id for c in chunks} == {"gemini-stream"}  # nosec B101
    assert chunks[1].delta.content == " it up." and chunks[1].delta.tool_calls[0].is_start  # nosec B101
    assert chunks[2].delta.tool_calls[-1].cumulative is True  # nosec B101
    combined = accumulate_chunks(chunks)
    assert combined.text == "Looking it up."  # nosec B101
    (call,) = combined.tool_calls
    assert call.id.startswith("call-") and call.name == "lookup"  # nosec B101
    assert json.loads(call.arguments_json) == {"q": "x", "limit": 3}  # nosec B101
    assert adapter.last_stream_state is StreamState.COMPLETED  # nosec B101


def test_stream_translator_switches_call_on_new_name():
    ids = iter(["call-1", "call-2"])
    translator = GeminiChunkTranslator(MergedToolCallTracker(id_factory=lambda: next(ids)))
    translator(_response({"function_call": {"name": "first", "args": {"a": 1}}}))
    (chunk,) = translator(_response({"function_call": {"name": "second", "args": {"b": 2}}}))
    start, update = chunk.delta.tool_calls
    assert start.id == "call-2" and start.name == "second"  # nosec B101
    assert json.loads(update.arguments_json) == {"b": 2}  # nosec B101


def test_stream_parts_in_one_response_are_separate_calls():
    translator = GeminiChunkTranslator(MergedToolCallTracker(id_factory=lambda: "call-5"))
    (chunk,) = translator(
        _response(
            {"function_call": {"name": "a", "args": {"n": 1}}},
            {"function_call": {"name": "b", "args": {"n": 2}}},
            {"function_call": {"name": "c", "args": {"n": 3}}},
        )
    )
    calls = accumulate_chunks([chunk]).tool_calls
    assert [c.name for c in calls] == ["a", "b", "c"]  # nosec B101
    assert [c.id for c in calls] == ["call-5", "call-5-1", "call-5-2"]  # nosec B101
    assert [json.loads(c.arguments_json) for c in calls] == [{"n": 1}, {"n": 2}, {"n": 3}]  # nosec B101


def test_stream_repeated_name_in_one_response_is_not_merged(hello_request):
    adapter, _ = _adapter(
        stream=[
            _response(
                {"function_call": {"name": "get_weather", "args": {"city": "Paris"}}},
                {"function_call": {"name": "get_weather", "args": {"city": "London"}}},
            ),
            _response({"function_call": {"name": "get_weather", "args": {"units": "C"}}}),
        ]
    )
    chunks: List[StreamChunk] = []
    adapter.send_streaming(hello_request, chunks.append)

    first, second = accumulate_chunks(chunks).tool_calls
    assert first.id != second.id  # nosec B101
    assert json.loads(first.arguments_json) == {"city": "Paris"}  # nosec B101
    assert json.loads(second.arguments_json) == {"city": "London", "units": "C"}  # nosec B101
    assert adapter.last_stream_state is StreamState.COMPLETED  # nosec B101


def test_stream_cancel_between_responses(hello_request):
    adapter, _ = _adapter(stream=[_response({"text": str(i)}) for i in range(4)])
    seen: List[str] = []

    def sink(chunk: StreamChunk) -> None:
        seen.append(chunk.delta.content)
        adapter.cancel()

    adapter.send_streaming(hello_request, sink)
    assert seen == ["0"] and adapter.last_stream_state is StreamState.CANCELLED  # nosec B101


def test_stream_cancelled_while_opening_raises_cancelled(hello_request):
    adapter, models = _adapter(stream=[_response({"text": "late"})])
    opened = models.generate_content_stream
    token = CancellationToken()

    def open_then_cancel(**kwargs: Any):
        stream = opened(**kwargs)
        token.cancel()
        return stream

    models.generate_content_stream = open_then_cancel
    with pytest.raises(CancelledError):
        adapter._open_stream(hello_request, token)

    seen: List[StreamChunk] = []
    adapter.send_streaming(hello_request, seen.append)
    assert [c.delta.content for c in seen] == ["late"]  # nosec B101


def test_connection_check():
    adapter, models = _adapter(result=_response({"text": "Hi"}))
    assert adapter.test_connection() is True  # nosec B101
    assert models.calls == [{"model": "gemini-1.5-flash", "contents": "Hello"}]  # nosec B101
    failing, _ = _adapter(result=RuntimeError("API key not valid"))
    assert failing.test_connection() is False  # nosec B101


def test_list_models_keeps_generate_content_models():
    listing = [
        SimpleNamespace(
            name="models/gemini-2.0-flash",
            display_name="Gemini 2.0 Flash",
            supported_actions=["generateContent", "countTokens"],
            input_token_limit=1048576,
            output_token_limit=8192,
        ),
        SimpleNamespace(
            name="models/text-embedding-004",
            display_name="Text Embedding 004",
            supported_actions=["embedContent"],
            input_token_limit=2048,
            output_token_limit=1,
        ),
    ]
    adapter, _ = _adapter(listing=listing, catalog=ModelCatalog(documents={"google": {"models": []}}))
    (model,) = adapter.list_models()
    assert model.id == "gemini-2.0-flash" and model.display_name == "Gemini 2.0 Flash"  # nosec B101
    assert model.context_window_tokens == 1048576 and model.max_output_tokens == 8192  # nosec B101
    assert model.provider == "google"  # nosec B101
