"""Shared fixtures for the relay_providers test suite.

- Every test runs with provider environment variables cleared and the config,
  timeout and HTTP client caches reset, so results never depend on the
  developer's shell.
- ``log_capture`` attaches a handler to the ``relay`` logger (which does not
  propagate to the root logger) and exposes parsed structured events.
- ``small_catalog`` is an isolated in-memory catalog.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Iterator, List, Optional

import pytest

from relay_providers.base.http import close_all_clients
from relay_providers.base.logging import ROOT_LOGGER_NAME, get_logger
from relay_providers.base.models import ChatRequest, Message
from relay_providers.base.timeouts import reset_timeout_config
from relay_providers.catalog import ModelCatalog
from relay_providers.config import reset_config_cache

_PROVIDERS = ("OPENAI", "ANTHROPIC", "GOOGLE", "GEMINI", "OPENROUTER", "REQUESTY")
_SUFFIXES = ("API_KEY", "BASE_URL", "APP_URL", "APP_TITLE")


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for prefix in _PROVIDERS:
        for suffix in _SUFFIXES:
            monkeypatch.delenv(f"{prefix}_{suffix}", raising=False)
    for name in list(os.environ):
        if name.startswith("RELAY_"):
            monkeypatch.delenv(name, raising=False)
    reset_config_cache()
    reset_timeout_config()
    yield
    reset_config_cache()
    reset_timeout_config()
    close_all_clients()


class LogCapture:
    """Records emitted on the ``relay`` logger plus decoded event payloads."""

    def __init__(self) -> None:
        self.records: List[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    def events(self, name: Optional[str] = None) -> List[Dict[str, Any]]:
        out = []
        for record in self.records:
            try:
                payload = json.loads(record.getMessage())
            except ValueError:
                continue
            if isinstance(payload, dict) and (name is None or payload.get("event") == name):
                out.append(payload)
        return out

    def text(self) -> str:
        return "\n".join(r.getMessage() for r in self.records)


@pytest.fixture()
def log_capture(monkeypatch: pytest.MonkeyPatch) -> Iterator[LogCapture]:
    monkeypatch.setenv("RELAY_LOG_LEVEL", "DEBUG")
    capture = LogCapture()
    handler = logging.Handler()
    handler.emit = capture.emit  # type: ignore[method-assign]
    root = get_logger(ROOT_LOGGER_NAME)
    root.addHandler(handler)
    try:
        yield capture
    finally:
        root.removeHandler(handler)


@pytest.fixture()
def small_catalog() -> ModelCatalog:
    return ModelCatalog(
        documents={
            "fake": {
                "display_name": "Fake Provider",
                "models": [
                    {"id": "fake-large", "name": "Fake Large", "context_length": 32000, "supports_tools": True},
                    {"id": "fake-small", "name": "Fake Small"},
                ],
            },
            "openrouter": {
                "display_name": "OpenRouter",
                "models": [{"id": "openai/gpt-4.1", "name": "GPT-4.1 (via OpenRouter)"}],
            },
        }
    )


@pytest.fixture()
def hello_request() -> ChatRequest:
    return ChatRequest(model="test-model", messages=[Message(role="user", content="Say hello")])
