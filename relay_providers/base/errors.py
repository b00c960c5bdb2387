"""Provider error taxonomy public surface.

Re-exports the implementations under ``relay_providers.base.errors_parts`` so
callers have one stable import path.
"""

from .errors_parts import (
    RETRYABLE_CODES,
    ErrorCode,
    MissingCredentialError,
    ProviderError,
    UnsupportedProviderError,
    UpstreamDecodeError,
    UpstreamTransportError,
    classify_exception,
    wrap_upstream_error,
)

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
