"""Environment key resolution, config file merging and timeout overrides."""
from __future__ import annotations

import json

import httpx

from relay_providers.base.timeouts import get_timeout_config, reset_timeout_config
from relay_providers.config import get_provider_config, reset_config_cache
from relay_providers.config.env import (
    get_env_var_candidates,
    get_env_var_name,
    is_placeholder,
    resolve_provider_key,
)


def test_env_var_names():
    assert get_env_var_name("OpenRouter") == "OPENROUTER_API_KEY"  # nosec B101
    assert list(get_env_var_candidates("google")) == ["GEMINI_API_KEY", "GOOGLE_API_KEY"]  # nosec B101
    assert get_env_var_name("nope") is None  # nosec B101
    assert list(get_env_var_candidates("nope")) == []  # nosec B101


def test_resolve_key_prefers_canonical(monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "alias-key")
    assert resolve_provider_key("google") == ("alias-key", "GOOGLE_API_KEY")  # nosec B101
    monkeypatch.setenv("GEMINI_API_KEY", "canonical-key")
    assert resolve_provider_key("google") == ("canonical-key", "GEMINI_API_KEY")  # nosec B101


def test_resolve_key_skips_placeholders(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "your-api-key-here")
    assert resolve_provider_key("openai") == (None, None)  # nosec B101
    assert is_placeholder("CHANGEME") and is_placeholder("xxxx")  # nosec B101
    assert not is_placeholder("sk-live-123") and not is_placeholder(None)  # nosec B101


def test_defaults_for_routers():
    cfg = get_provider_config("openrouter")
    assert cfg["base_url"] == "https://openrouter.ai/api/v1"  # nosec B101
    assert get_provider_config("requesty")["base_url"] == "https://router.requesty.ai/v1"  # nosec B101
    assert get_provider_config("openai") == {}  # nosec B101


def test_merge_order_file_env_overrides(monkeypatch, tmp_path):
    path = tmp_path / "providers.json"
    path.write_text(
        json.dumps({"openrouter": {"base_url": "https://file.example/v1", "app_title": "File", "api_key": "leak"}}),
        encoding="utf-8",
    )
    monkeypatch.setenv("RELAY_PROVIDERS_CONFIG", str(path))
    reset_config_cache()
    cfg = get_provider_config("openrouter")
    assert cfg["base_url"] == "https://file.example/v1" and cfg["app_title"] == "File"  # nosec B101
    assert "api_key" not in cfg  # nosec B101

    monkeypatch.setenv("OPENROUTER_BASE_URL", "https://env.example/v1")
    assert get_provider_config("openrouter")["base_url"] == "https://env.example/v1"  # nosec B101

    merged = get_provider_config("openrouter", {"base_url": "https://arg.example/v1", "app_url": None})
    assert merged["base_url"] == "https://arg.example/v1"  # nosec B101
    assert "app_url" not in merged  # nosec B101


def test_yaml_config_file(monkeypatch, tmp_path):
    path = tmp_path / "providers.yaml"
    path.write_text("requesty:\n  app_url: https://example.org/app\n", encoding="utf-8")
    monkeypatch.setenv("RELAY_PROVIDERS_CONFIG", str(path))
    reset_config_cache()
    assert get_provider_config("requesty")["app_url"] == "https://example.org/app"  # nosec B101


def test_timeout_overrides(monkeypatch):
    monkeypatch.setenv("RELAY_TIMEOUT_START_SECONDS", "5")
    monkeypatch.setenv("RELAY_TIMEOUT_STREAM_SECONDS", "not-a-number")
    monkeypatch.setenv("RELAY_TIMEOUT_HTTP_SECONDS", "-1")
    reset_timeout_config()
    cfg = get_timeout_config()
    assert cfg.start_timeout_seconds == 5.0  # nosec B101
    assert cfg.stream_timeout_seconds == 60.0 and cfg.http_timeout_seconds == 60.0  # nosec B101
    timeout = cfg.to_httpx()
    assert isinstance(timeout, httpx.Timeout)  # nosec B101
    assert timeout.connect == 5.0 and timeout.read == 60.0  # nosec B101
