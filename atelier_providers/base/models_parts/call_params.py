"""Optional generation controls passed to ``call_api``."""
from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ReasoningEffort = Literal["minimal", "low", "medium", "high"]


class APICallParams(BaseModel):
    """Sampling and length controls.

    Every field is optional; adapters omit absent fields from the wire body
    instead of substituting vendor defaults.
    """

    model_config = ConfigDict(populate_by_name=True)

    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0, alias="topP")
    max_tokens: Optional[int] = Field(default=None, gt=0, alias="maxTokens")
    frequency_penalty: Optional[float] = Field(default=None, alias="frequencyPenalty")
    presence_penalty: Optional[float] = Field(default=None, alias="presencePenalty")
    reasoning_effort: Optional[ReasoningEffort] = Field(default=None, alias="reasoningEffort")


__all__ = ["APICallParams", "ReasoningEffort"]
