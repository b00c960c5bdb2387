"""OpenAI provider package."""

from .client import OpenAIAdapter

__all__ = ["OpenAIAdapter"]
