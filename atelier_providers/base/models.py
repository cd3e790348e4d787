"""
Provider-agnostic domain models (DTOs) public surface.

Re-exports the implementations under ``atelier_providers.base.models_parts``;
this is the stable import path for adapters and consumers.
"""

from .models_parts.call_params import APICallParams, ReasoningEffort
from .models_parts.content_part import Attachment, ContentPart, ContentPartType
from .models_parts.drawing import (
    Candidate,
    DrawingMessage,
    DrawingPart,
    DrawingResponse,
    DrawingStreamDelta,
    GeneratedImage,
    ImageGenerationConfig,
    InlineData,
    PromptFeedback,
    ThoughtTraceItem,
    UsageMetadata,
)
from .models_parts.message import ChatMessage, Role, normalize_role
from .models_parts.provider_config import MaxTokensParam, ModelCapabilities, ModelConfig, ProviderConfig
from .models_parts.results import AIResponse, StreamChunk

__all__ = [
    "APICallParams",
    "ReasoningEffort",
    "Attachment",
    "ContentPart",
    "ContentPartType",
    "ChatMessage",
    "Role",
    "normalize_role",
    "MaxTokensParam",
    "ModelCapabilities",
    "ModelConfig",
    "ProviderConfig",
    "AIResponse",
    "StreamChunk",
    "Candidate",
    "DrawingMessage",
    "DrawingPart",
    "DrawingResponse",
    "DrawingStreamDelta",
    "GeneratedImage",
    "ImageGenerationConfig",
    "InlineData",
    "PromptFeedback",
    "ThoughtTraceItem",
    "UsageMetadata",
]
