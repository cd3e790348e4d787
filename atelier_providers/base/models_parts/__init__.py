"""Models parts package public surface.

Prefer importing from `atelier_providers.base.models`, the stable path.
"""

from .call_params import APICallParams, ReasoningEffort
from .content_part import Attachment, ContentPart, ContentPartType
from .drawing import (
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
from .message import ChatMessage, Role, normalize_role
from .provider_config import MaxTokensParam, ModelCapabilities, ModelConfig, ProviderConfig
from .results import AIResponse, StreamChunk

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
