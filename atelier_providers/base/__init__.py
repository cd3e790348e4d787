"""
Providers Base Package

Provider-agnostic contracts shared by every adapter:

- Interfaces: the ``Provider`` and ``DrawingService`` protocols
- Models (DTOs): neutral messages, call parameters, results, drawing types
- Errors: the ``ProviderError`` taxonomy and ``ErrorCode``
- Factory: lazy construction of adapters from a configured ``api_type``
"""

from .errors import ErrorCode, ProviderError
from .factory import ProviderFactory, UnknownProviderError, create_drawing_service, create_provider
from .interfaces import DrawingService, Provider, StreamDecoder
from .models import AIResponse, APICallParams, ChatMessage, ProviderConfig, StreamChunk

__all__ = [
    "ErrorCode",
    "ProviderError",
    "ProviderFactory",
    "UnknownProviderError",
    "create_drawing_service",
    "create_provider",
    "DrawingService",
    "Provider",
    "StreamDecoder",
    "AIResponse",
    "APICallParams",
    "ChatMessage",
    "ProviderConfig",
    "StreamChunk",
]
