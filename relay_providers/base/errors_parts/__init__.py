"""Errors parts package public surface.

Prefer importing from ``relay_providers.base.errors`` for the stable surface.
"""

from .error_code import ErrorCode, RETRYABLE_CODES
from .provider_error import (
    MissingCredentialError,
    ProviderError,
    UnsupportedProviderError,
    UpstreamDecodeError,
    UpstreamTransportError,
)
from .classification import classify_exception, wrap_upstream_error

__all__ = [
    "ErrorCode",
    "RETRYABLE_CODES",
    "ProviderError",
    "MissingCredentialError",
    "UnsupportedProviderError",
    "UpstreamTransportError",
    "UpstreamDecodeError",
    "classify_exception",
    "wrap_upstream_error",
]
