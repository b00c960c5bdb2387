"""Cooperative cancellation primitives (public API facade).

``CancellationToken`` is the per-call handle an adapter creates when a send
begins and discards when it ends. ``CancelledError`` is raised by code that
observes a cancelled token; the streaming driver converts it into a quiet
return.
"""

from .cancellation_parts.cancelled_error import CancelledError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError"]
