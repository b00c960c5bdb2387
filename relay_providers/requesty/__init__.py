"""Requesty provider package."""

from .client import RequestyAdapter

__all__ = ["RequestyAdapter"]
