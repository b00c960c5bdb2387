"""
Map OpenRouter ``GET /models`` entries to model descriptors.

OpenRouter returns ``{"data": [...]}`` where each entry carries ``id``,
``name``, ``context_length`` and optional capability flags. Live values are
authoritative here (the router's list changes far more often than the
bundled catalog); missing fields fall back to conservative defaults.
"""

from __future__ import annotations

from typing import Any, List, Mapping

from ..base.errors import ErrorCode, UpstreamDecodeError
from ..base.models import ModelDescriptor
from ..config.defaults import DISCOVERY_DEFAULT_CONTEXT_TOKENS, DISCOVERY_DEFAULT_MAX_OUTPUT_TOKENS


def _display_name(entry: Mapping[str, Any]) -> str:
    name = entry.get("name")
    if name:
        return str(name)
    model_id = str(entry.get("id", ""))
    vendor, _, short = model_id.partition("/")
    return f"{vendor} {short}" if short else model_id


def descriptor_from_entry(entry: Mapping[str, Any], provider: str = "openrouter") -> ModelDescriptor:
    capabilities = entry.get("capabilities") or {}
    return ModelDescriptor(
        id=str(entry["id"]),
        display_name=_display_name(entry),
        provider=provider,
        context_window_tokens=int(entry.get("context_length") or DISCOVERY_DEFAULT_CONTEXT_TOKENS),
        supports_tools=bool(capabilities.get("tools", False)),
        supports_json_mode=bool(capabilities.get("json_response", False)),
        max_output_tokens=int(capabilities.get("max_output_tokens") or DISCOVERY_DEFAULT_MAX_OUTPUT_TOKENS),
    )


def descriptors_from_listing(body: Any, provider: str = "openrouter") -> List[ModelDescriptor]:
    """Translate a full listing body; entries without an ``id`` are skipped.

    Raises:
        UpstreamDecodeError: if ``body`` is not an object with a ``data`` list.
    """
    data = body.get("data") if isinstance(body, Mapping) else None
    if not isinstance(data, list):
        raise UpstreamDecodeError(
            code=ErrorCode.DECODE,
            message=f"{provider} model listing has no data array",
            provider=provider,
        )
    return [descriptor_from_entry(e, provider) for e in data if isinstance(e, Mapping) and e.get("id")]


__all__ = ["descriptor_from_entry", "descriptors_from_listing"]
