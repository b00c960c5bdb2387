"""
Model descriptor for catalog and discovery results.

Descriptors are read-only and keyed by ``(provider, id)``.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class ModelDescriptor:
    """Static or discovered information about one model.

    Attributes:
        id: Model identifier as sent upstream.
        display_name: Human-friendly name.
        provider: Canonical provider key owning this entry.
        context_window_tokens: Maximum context window size.
        supports_tools: Whether the model accepts tool declarations.
        supports_json_mode: Whether the model supports a JSON response mode.
        max_output_tokens: Maximum tokens the model can generate per call.
    """

    id: str
    display_name: str
    provider: str
    context_window_tokens: int = 4096
    supports_tools: bool = False
    supports_json_mode: bool = False
    max_output_tokens: int = 4096

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary of the entry."""
        return asdict(self)


__all__ = ["ModelDescriptor"]
