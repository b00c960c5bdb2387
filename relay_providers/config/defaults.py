"""relay_providers.config.defaults
===============================

Small, stable default values used by the adapters. They can be overridden
through :func:`relay_providers.config.get_provider_config` (config file or
environment) but give sensible behaviour with no configuration at all.

Plain constants only; this module imports nothing from the package.
"""

from __future__ import annotations

# ---- Base URLs ----
# SDK-backed providers use the vendor SDK default when no override is given.
OPENROUTER_DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
REQUESTY_DEFAULT_BASE_URL = "https://router.requesty.ai/v1"

# ---- Generation defaults ----
# Applied by providers whose APIs require or strongly expect a value.
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_OUTPUT_TOKENS = 4096
# Anthropic's Messages API rejects requests without max_tokens.
ANTHROPIC_DEFAULT_MAX_TOKENS = 4096

# ---- Connectivity checks ----
ANTHROPIC_TEST_MODEL = "claude-3-haiku-20240307"
GEMINI_TEST_MODEL = "gemini-1.5-flash"
CONNECTION_TEST_PROMPT = "Hello"

# ---- Live model listing ----
# Used when a discovery endpoint omits a field.
DISCOVERY_DEFAULT_CONTEXT_TOKENS = 4096
DISCOVERY_DEFAULT_MAX_OUTPUT_TOKENS = 4096

# ---- Router attribution headers ----
DEFAULT_APP_TITLE = "relay-providers"

# ---- Fallback identifiers ----
STREAM_FALLBACK_ID = "stream"
OPENROUTER_RESPONSE_FALLBACK_ID = "openrouter-response"
REQUESTY_RESPONSE_FALLBACK_ID = "requesty-response"
GEMINI_RESPONSE_FALLBACK_ID = "gemini-response"
GEMINI_STREAM_FALLBACK_ID = "gemini-stream"

# ---- Gemini safety settings ----
GEMINI_SAFETY_THRESHOLD = "BLOCK_MEDIUM_AND_ABOVE"
GEMINI_HARM_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)

# ---- OpenAI live listing ----
# The models endpoint also lists embedding, audio and image models.
OPENAI_CHAT_MODEL_PREFIXES = ("gpt-", "o1", "o3", "o4", "chatgpt-")
OPENAI_RESPONSE_FALLBACK_ID = "openai-response"
