"""OpenAI adapter against an injected fake SDK client."""
from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any, Dict, List

import pytest

from relay_providers.base.errors import ErrorCode, UpstreamTransportError
from relay_providers.base.models import ChatRequest, Message, StreamChunk, Tool
from relay_providers.base.streaming import StreamState, accumulate_chunks
from relay_providers.catalog import ModelCatalog
from relay_providers.openai import OpenAIAdapter


class FakeStream:
    """Iterable of chunk dicts with the SDK stream's ``close``."""

    def __init__(self, chunks: List[Dict[str, Any]]) -> None:
        self._chunks = list(chunks)
        self.closed = False

    def __iter__(self):
        for chunk in self._chunks:
            if self.closed:
                raise RuntimeError("stream closed")
            yield chunk

    def close(self) -> None:
        self.closed = True


class FakeCompletions:
    def __init__(self, result: Any) -> None:
        self.result = result
        self.calls: List[Dict[str, Any]] = []

    def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


class FakeModels:
    def __init__(self, ids: List[str], error: Exception = None) -> None:
        self._ids = ids
        self._error = error

    def list(self):
        if self._error is not None:
            raise self._error
        return [SimpleNamespace(id=i) for i in self._ids]


class FakeOpenAI:
    def __init__(self, result: Any = None, model_ids: List[str] = (), models_error: Exception = None) -> None:
        self.chat = SimpleNamespace(completions=FakeCompletions(result))
        self.models = FakeModels(list(model_ids), models_error)

    @property
    def calls(self) -> List[Dict[str, Any]]:
        return self.chat.completions.calls


def _tool_request(**overrides: Any) -> ChatRequest:
    fields: Dict[str, Any] = dict(
        model="gpt-4o-mini",
        messages=[Message(role="system", content="be terse"), Message(role="user", content="weather?")],
        max_output_tokens=64,
        tools=[Tool(name="get_weather", parameter_schema={"type": "object", "properties": {"city": {"type": "string"}}})],
    )
    fields.update(overrides)
    return ChatRequest(**fields)


def test_send_payload_and_tool_calls():
    completion = {
        "id": "chatcmpl-1",
        "choices": [
            {
                "message": {
                    "role": "assistant",
                    "content": None,
                    "tool_calls": [
                        {"id": "call_a", "type": "function", "function": {"name": "get_weather", "arguments": '{"city": "Oslo"}'}}
                    ],
                }
            }
        ],
    }
    fake = FakeOpenAI(completion)
    adapter = OpenAIAdapter("sk-live", client=fake)
    response = adapter.send(_tool_request())

    assert response.id == "chatcmpl-1" and response.text == ""  # nosec B101
    (call,) = response.tool_calls
    assert call.name == "get_weather" and json.loads(call.arguments_json) == {"city": "Oslo"}  # nosec B101

    (kwargs,) = fake.calls
    assert kwargs["max_completion_tokens"] == 64 and "max_tokens" not in kwargs  # nosec B101
    assert "temperature" not in kwargs and kwargs["stream"] is False  # nosec B101
    assert kwargs["messages"][0] == {"role": "system", "content": "be terse"}  # nosec B101
    assert kwargs["tools"][0]["function"]["name"] == "get_weather"  # nosec B101


def test_send_without_id_uses_fallback(hello_request):
    fake = FakeOpenAI({"choices": [{"message": {"content": "hello"}}]})
    response = OpenAIAdapter("sk-live", client=fake).send(hello_request)
    assert response.id == "openai-response" and response.text == "hello"  # nosec B101


def test_send_sdk_error_is_wrapped(hello_request):
    failure = RuntimeError("Rate limit reached for requests")
    fake = FakeOpenAI(failure)
    with pytest.raises(UpstreamTransportError) as info:
        OpenAIAdapter("sk-live", client=fake).send(hello_request)
    assert info.value.code is ErrorCode.RATE_LIMIT and info.value.retryable  # nosec B101
    assert info.value.__cause__ is failure  # nosec B101
    assert str(info.value).startswith("openai:")  # nosec B101


def test_stream_text_and_tool_fragments():
    stream = FakeStream(
        [
            {"id": "c1", "choices": [{"delta": {"role": "assistant", "content": "Let me check. "}}]},
            {"id": "c1", "choices": [{"delta": {"tool_calls": [{"index": 0, "id": "call_z", "function": {"name": "get_weather", "arguments": '{"ci'}}]}}]},
            {"id": "c1", "choices": [{"delta": {"tool_calls": [{"index": 0, "function": {"arguments": 'ty": "Rome"}'}}]}}]},
            {"id": "c1", "choices": [{"delta": {}, "finish_reason": "tool_calls"}]},
        ]
    )
    fake = FakeOpenAI(stream)
    adapter = OpenAIAdapter("sk-live", client=fake)
    chunks: List[StreamChunk] = []
    adapter.send_streaming(_tool_request(), chunks.append)

    assert fake.calls[0]["stream"] is True  # nosec B101
    combined = accumulate_chunks(chunks)
    assert combined.id == "c1" and combined.text == "Let me check. "  # nosec B101
    assert json.loads(combined.tool_calls[0].arguments_json) == {"city": "Rome"}  # nosec B101
    assert stream.closed is True  # nosec B101


def test_cancel_closes_sdk_stream(hello_request):
    stream = FakeStream([{"choices": [{"delta": {"content": str(i)}}]} for i in range(5)])
    adapter = OpenAIAdapter("sk-live", client=FakeOpenAI(stream))
    seen: List[str] = []

    def sink(chunk: StreamChunk) -> None:
        seen.append(chunk.delta.content)
        if len(seen) == 2:
            adapter.cancel()

    adapter.send_streaming(hello_request, sink)
    assert seen == ["0", "1"]  # nosec B101
    assert stream.closed is True  # nosec B101
    assert adapter.last_stream_state is StreamState.CANCELLED  # nosec B101


def test_list_models_filters_chat_models_and_merges_catalog():
    catalog = ModelCatalog(
        documents={"openai": {"models": [{"id": "gpt-4o", "name": "GPT-4o", "context_length": 128000, "supports_tools": True}]}}
    )
    fake = FakeOpenAI(model_ids=["whisper-1", "gpt-4o", "text-embedding-3-small", "o3-mini"])
    models = OpenAIAdapter("sk-live", client=fake, catalog=catalog).list_models()

    assert [m.id for m in models] == ["gpt-4o", "o3-mini"]  # nosec B101
    assert models[0].display_name == "GPT-4o" and models[0].context_window_tokens == 128000  # nosec B101
    assert models[1].display_name == "o3-mini" and models[1].supports_tools is False  # nosec B101


def test_list_models_falls_back_to_catalog_on_error():
    catalog = ModelCatalog(documents={"openai": {"models": [{"id": "gpt-4o"}]}})
    fake = FakeOpenAI(models_error=RuntimeError("boom"))
    models = OpenAIAdapter("sk-live", client=fake, catalog=catalog).list_models()
    assert [m.id for m in models] == ["gpt-4o"]  # nosec B101


def test_connection():
    assert OpenAIAdapter("sk-live", client=FakeOpenAI(model_ids=["gpt-4o"])).test_connection() is True  # nosec B101
    broken = FakeOpenAI(models_error=RuntimeError("401 unauthorized"))
    assert OpenAIAdapter("sk-live", client=broken).test_connection() is False  # nosec B101
    assert OpenAIAdapter(None).test_connection() is False  # nosec B101
