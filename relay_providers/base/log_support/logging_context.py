"""Per-call logging context.

A :class:`LogContext` is built once when an adapter call begins and passed to
every structured event of that call, so ``chat.start`` / ``stream.finalize``
and any ``adapter.error`` in between share the same identifying fields.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class LogContext:
    """Identifying fields attached to the events of one call.

    ``extra`` holds call-specific fields (message count, tool count, ...);
    ``None`` values anywhere are omitted from the emitted payload.
    """

    provider: Optional[str] = None
    model: Optional[str] = None
    request_id: Optional[str] = None
    response_id: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def bind(self, **fields: Any) -> "LogContext":
        """Return a copy whose ``extra`` also carries ``fields``."""
        return replace(self, extra={**self.extra, **fields})

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "provider": self.provider,
            "model": self.model,
            "request_id": self.request_id,
            "response_id": self.response_id,
            **self.extra,
        }
        return {k: v for k, v in payload.items() if v is not None}


__all__ = ["LogContext"]
