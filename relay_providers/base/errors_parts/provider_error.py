"""
Structured provider error types.

``ProviderError`` wraps upstream failures with a normalized :class:`ErrorCode`
and the originating provider name. The subclasses name the failure kinds that
adapters raise; they add no fields so ``except ProviderError`` catches all of
them.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class ProviderError(Exception):
    """A failure attributed to a single provider.

    Attributes:
        code: Normalized classification for the failure.
        message: Human-readable description. Never contains credentials.
        provider: Provider key where the error originated (e.g. ``"openai"``).
        model: Optional model identifier associated with the failure.
        retryable: Hint for callers that implement their own retry policy.
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    provider: str
    model: Optional[str] = None
    retryable: bool = False
    raw: Optional[Exception] = None

    def __str__(self) -> str:
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"


class MissingCredentialError(ProviderError):
    """Raised when an adapter is asked to call upstream without an API key."""


class UnsupportedProviderError(ProviderError):
    """Raised by the factory for provider names it has no constructor for."""


class UpstreamTransportError(ProviderError):
    """Network, HTTP status or SDK failure while talking to a provider."""


class UpstreamDecodeError(ProviderError):
    """Upstream returned a body that could not be decoded into the canonical model."""


__all__ = [
    "ProviderError",
    "MissingCredentialError",
    "UnsupportedProviderError",
    "UpstreamTransportError",
    "UpstreamDecodeError",
]
