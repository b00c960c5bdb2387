"""Google Gemini provider package."""

from .client import GeminiAdapter

__all__ = ["GeminiAdapter"]
