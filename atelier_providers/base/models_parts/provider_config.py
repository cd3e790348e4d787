"""
Provider configuration DTOs (pydantic v2, immutable).

``ProviderConfig`` is created per provider/session and owned by exactly one
adapter instance. It is frozen; the single learned correction an adapter keeps
(the max-tokens parameter name) lives on the adapter, not here.
"""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

MaxTokensParam = Literal["max_tokens", "max_completion_tokens"]


class ModelCapabilities(BaseModel):
    """Explicit per-model capability overrides."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    max_tokens_param: Optional[MaxTokensParam] = Field(default=None, alias="maxTokensParam")
    supports_image: bool = Field(default=False, alias="supportsImage")


class ModelConfig(BaseModel):
    """A configured model entry for a provider."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: Optional[str] = None
    capabilities: Optional[ModelCapabilities] = None
    supports_image: bool = Field(default=False, alias="supportsImage")
    api_type: Optional[str] = Field(default=None, alias="apiType")


class ProviderConfig(BaseModel):
    """Connection settings for one provider.

    ``base_url`` and ``api_key`` may be empty here; adapters raise
    ``ConfigError`` at call time when either is missing.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    base_url: str = Field(default="", alias="baseUrl")
    api_key: str = Field(default="", alias="apiKey")
    model_id: str = Field(default="", alias="modelId")
    models: List[ModelConfig] = Field(default_factory=list)
    api_type: str = Field(default="openai", alias="apiType")

    def find_model(self, model_id: str) -> Optional[ModelConfig]:
        for model in self.models:
            if model.id == model_id:
                return model
        return None


__all__ = ["MaxTokensParam", "ModelCapabilities", "ModelConfig", "ProviderConfig"]
