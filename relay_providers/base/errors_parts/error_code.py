"""
Normalized provider error codes.

Values are lowercase snake_case and form a stable contract for logging and
for callers that branch on failure categories.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Failure categories shared by every adapter."""

    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    TRANSIENT = "transient"
    UNSUPPORTED = "unsupported"
    VALIDATION = "validation"
    DECODE = "decode"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    SERVER_ERROR = "server_error"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


RETRYABLE_CODES = frozenset(
    {
        ErrorCode.RATE_LIMIT,
        ErrorCode.TIMEOUT,
        ErrorCode.TRANSIENT,
        ErrorCode.UNAVAILABLE,
    }
)


__all__ = ["ErrorCode", "RETRYABLE_CODES"]
