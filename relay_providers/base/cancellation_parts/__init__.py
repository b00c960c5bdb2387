"""Cancellation parts package (token, state, error)."""

from .cancellation_token import CancellationToken
from .cancelled_error import CancelledError
from .state import State

__all__ = ["CancellationToken", "CancelledError", "State"]
