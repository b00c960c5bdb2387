"""
Provider-agnostic adapter contract.

``ProviderAdapter`` is the capability surface every provider implementation
satisfies. ``AdapterConstructor`` is what the factory stores per provider
name: any callable taking ``(api_key, endpoint)`` and returning an adapter,
so runtime registration needs no subclassing.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Protocol, runtime_checkable

from .models import ChatRequest, ChatResponse, ModelDescriptor, StreamChunk


@runtime_checkable
class ProviderAdapter(Protocol):
    """Canonical interface of a chat-completion provider adapter."""

    @property
    def provider(self) -> str:
        """Canonical lowercase provider name, e.g. ``"openai"``."""
        ...

    def test_connection(self) -> bool:
        """Issue the cheapest authenticated call; ``False`` on any failure, never raises."""
        ...

    def list_models(self) -> List[ModelDescriptor]:
        """Live discovery with static-catalog fallback; never raises."""
        ...

    def send(self, request: ChatRequest) -> ChatResponse:
        """Single-shot completion. Raises ``ProviderError`` prefixed with the provider."""
        ...

    def send_streaming(self, request: ChatRequest, sink: Callable[[StreamChunk], object]) -> None:
        """Stream chunks to ``sink`` until completion, failure, or :meth:`cancel`."""
        ...

    def cancel(self) -> None:
        """Abort the outstanding call, if any. Idempotent and silent."""
        ...


class AdapterConstructor(Protocol):
    def __call__(self, api_key: str, endpoint: Optional[str] = None) -> ProviderAdapter: ...


__all__ = ["ProviderAdapter", "AdapterConstructor"]
