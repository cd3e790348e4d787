"""atelier_providers package

Unified request layer for chat and image-generation models.

Purpose:
    Turn one neutral conversation (``ChatMessage`` list plus ``APICallParams``)
    into provider-specific HTTP calls for OpenAI Chat Completions, the OpenAI
    Responses API, OpenAI-compatible gateways such as OpenRouter, and Google
    Gemini, and normalize their replies back into ``AIResponse`` or a stream
    of ``StreamChunk`` values.

Public API (re-exported):
    - Version: ``__version__``
    - Exceptions: :class:`ProviderError`, :class:`ErrorCode`
    - Factory: :class:`ProviderFactory`, :func:`create_provider`,
      :func:`create_drawing_service`
    - Configuration: :func:`load_provider_config`
"""

from .base.errors import ErrorCode, ProviderError
from .base.factory import ProviderFactory, create_drawing_service, create_provider
from .config import load_provider_config

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ErrorCode",
    "ProviderError",
    "ProviderFactory",
    "create_drawing_service",
    "create_provider",
    "load_provider_config",
]
