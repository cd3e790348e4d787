"""OpenAI Responses API adapter package."""

from .client import OpenAIResponsesProvider

__all__ = ["OpenAIResponsesProvider"]
