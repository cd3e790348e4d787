"""Gemini adapter package (chat provider and drawing service)."""

from .client import GeminiProvider
from .drawing import GeminiDrawingService

__all__ = ["GeminiProvider", "GeminiDrawingService"]
