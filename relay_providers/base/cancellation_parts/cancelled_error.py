"""Cancellation error type.

Defines ``CancelledError``, raised by ``CancellationToken.raise_if_cancelled``.
Adapters catch it at the streaming boundary; it never reaches callers of
``send_streaming``.
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when an operation is cancelled cooperatively.

    Distinguishes cooperative cancellation from upstream failures so the
    streaming driver can end the call quietly instead of reporting an error.
    """


__all__ = ["CancelledError"]
