"""
Error classification helpers mapping exceptions to normalized ErrorCode values.

HTTP status extraction covers httpx and the vendor SDKs (which expose
``status_code`` directly or through ``response``); message heuristics are
the fallback for exceptions without a status.
"""
from __future__ import annotations

import json
from typing import Dict, Optional

import httpx

from .error_code import ErrorCode, RETRYABLE_CODES
from .provider_error import ProviderError, UpstreamDecodeError, UpstreamTransportError


def _extract_status(exc: BaseException) -> Optional[int]:
    """Return an HTTP status code carried by ``exc`` or ``None``.

    Checked in order: ``exc.status_code``, ``exc.status``,
    ``exc.response.status_code``.
    """
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.TRANSIENT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
}

_MESSAGE_PATTERNS = (
    (ErrorCode.TIMEOUT, ("timeout", "timed out")),
    (ErrorCode.AUTH, ("unauthorized", "forbidden", "api key", "authentication")),
    (ErrorCode.NOT_FOUND, ("not found", "does not exist")),
    (ErrorCode.UNAVAILABLE, ("unavailable", "overloaded")),
    (ErrorCode.VALIDATION, ("invalid", "malformed")),
    (ErrorCode.SERVER_ERROR, ("server error", "internal error")),
)


def _heuristic_from_message(msg: str) -> Optional[ErrorCode]:
    if "rate" in msg and "limit" in msg:
        return ErrorCode.RATE_LIMIT
    for code, patterns in _MESSAGE_PATTERNS:
        if any(p in msg for p in patterns):
            return code
    return None


def classify_exception(exc: BaseException) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. ProviderError passthrough.
        2. Timeout exceptions (builtin and httpx).
        3. HTTP status mapping.
        4. Substring heuristics on the message.
        5. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, ProviderError):
        return exc.code
    if isinstance(exc, (TimeoutError, httpx.TimeoutException)):
        return ErrorCode.TIMEOUT
    if isinstance(exc, json.JSONDecodeError):
        return ErrorCode.DECODE
    status = _extract_status(exc)
    if status is not None and status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    if status is not None and status >= 500:
        return ErrorCode.SERVER_ERROR
    code = _heuristic_from_message(str(exc).lower())
    return code if code is not None else ErrorCode.UNKNOWN


def wrap_upstream_error(
    exc: BaseException,
    *,
    provider: str,
    model: Optional[str] = None,
    action: str = "request",
) -> ProviderError:
    """Translate an arbitrary upstream exception into a ``ProviderError``.

    ``ProviderError`` instances pass through untouched. JSON decoding failures
    become :class:`UpstreamDecodeError`; everything else becomes
    :class:`UpstreamTransportError` with a classified code.

    Parameters:
        exc: The exception raised by the SDK, httpx, or a decoder.
        provider: Canonical provider key used as the message prefix.
        model: Optional model identifier for diagnostics.
        action: Short verb phrase for the message (``"request"``, ``"stream"``).
    """
    if isinstance(exc, ProviderError):
        return exc
    if isinstance(exc, json.JSONDecodeError):
        return UpstreamDecodeError(
            code=ErrorCode.DECODE,
            message=f"{provider} {action} returned malformed JSON: {exc}",
            provider=provider,
            model=model,
            raw=exc if isinstance(exc, Exception) else None,
        )
    code = classify_exception(exc)
    return UpstreamTransportError(
        code=code,
        message=f"{provider} {action} failed: {exc}",
        provider=provider,
        model=model,
        retryable=code in RETRYABLE_CODES,
        raw=exc if isinstance(exc, Exception) else None,
    )


__all__ = [
    "classify_exception",
    "wrap_upstream_error",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
