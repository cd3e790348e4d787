"""OpenAI-compatible adapter package (chat provider and drawing service)."""

from .client import OpenAICompletionsProvider
from .drawing import OpenAIDrawingService

__all__ = ["OpenAICompletionsProvider", "OpenAIDrawingService"]
