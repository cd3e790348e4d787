"""
Drawing (image generation) DTOs.

Every drawing backend is normalized to one candidate/parts response shape:
``DrawingResponse`` holds candidates, each with an ordered list of
``DrawingPart`` items that are text, an internal thought, or an inline image.
Blocking is reported through ``prompt_feedback.block_reason`` on a
structurally successful response, never as an exception.

``from_dict``/``to_dict`` use the camelCase names found on the wire.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ImageGenerationConfig(BaseModel):
    """Generation controls for drawing requests."""

    model_config = ConfigDict(populate_by_name=True)

    temperature: Optional[float] = None
    top_p: Optional[float] = Field(default=None, alias="topP")
    max_output_tokens: Optional[int] = Field(default=None, alias="maxOutputTokens")
    frequency_penalty: Optional[float] = Field(default=None, alias="frequencyPenalty")
    presence_penalty: Optional[float] = Field(default=None, alias="presencePenalty")
    response_mime_type: str = Field(default="image/png", alias="responseMimeType")
    include_thoughts: bool = Field(default=False, alias="includeThoughts")

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass
class InlineData:
    mime_type: str
    data: str

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "InlineData":
        return cls(mime_type=str(raw.get("mimeType") or raw.get("mime_type") or ""), data=str(raw.get("data") or ""))

    def to_dict(self) -> Dict[str, Any]:
        return {"mimeType": self.mime_type, "data": self.data}


@dataclass
class DrawingPart:
    """A candidate or history part: text, thought, or inline image."""

    text: Optional[str] = None
    thought: bool = False
    thought_signature: Optional[str] = None
    inline_data: Optional[InlineData] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "DrawingPart":
        inline = raw.get("inlineData") or raw.get("inline_data")
        text = raw.get("text")
        return cls(
            text=text if isinstance(text, str) else None,
            thought=bool(raw.get("thought")),
            thought_signature=raw.get("thoughtSignature"),
            inline_data=InlineData.from_dict(inline) if isinstance(inline, dict) else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.text is not None:
            out["text"] = self.text
        if self.thought:
            out["thought"] = True
        if self.thought_signature:
            out["thoughtSignature"] = self.thought_signature
        if self.inline_data is not None:
            out["inlineData"] = self.inline_data.to_dict()
        return out


@dataclass
class DrawingMessage:
    """One turn of drawing conversation history."""

    role: Literal["system", "user", "model", "assistant"]
    parts: List[DrawingPart] = field(default_factory=list)

    @classmethod
    def user_text(cls, text: str) -> "DrawingMessage":
        return cls(role="user", parts=[DrawingPart(text=text)])

    def text(self) -> str:
        return "\n".join(p.text for p in self.parts if p.text)


@dataclass
class UsageMetadata:
    prompt_token_count: Optional[int] = None
    candidates_token_count: Optional[int] = None
    total_token_count: Optional[int] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "UsageMetadata":
        return cls(
            prompt_token_count=raw.get("promptTokenCount"),
            candidates_token_count=raw.get("candidatesTokenCount"),
            total_token_count=raw.get("totalTokenCount"),
        )

    def to_dict(self) -> Dict[str, Any]:
        out = {
            "promptTokenCount": self.prompt_token_count,
            "candidatesTokenCount": self.candidates_token_count,
            "totalTokenCount": self.total_token_count,
        }
        return {k: v for k, v in out.items() if v is not None}


@dataclass
class PromptFeedback:
    block_reason: Optional[str] = None


@dataclass
class Candidate:
    parts: List[DrawingPart] = field(default_factory=list)
    role: str = "model"
    finish_reason: Optional[str] = None
    index: int = 0
    safety_ratings: List[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any], position: int = 0) -> "Candidate":
        content = raw.get("content") or {}
        parts = content.get("parts") if isinstance(content, dict) else None
        return cls(
            parts=[DrawingPart.from_dict(p) for p in parts or [] if isinstance(p, dict)],
            role=str(content.get("role") or "model") if isinstance(content, dict) else "model",
            finish_reason=raw.get("finishReason"),
            index=int(raw.get("index", position) or 0),
            safety_ratings=list(raw.get("safetyRatings") or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "content": {"parts": [p.to_dict() for p in self.parts], "role": self.role},
            "index": self.index,
            "safetyRatings": list(self.safety_ratings),
        }
        if self.finish_reason is not None:
            out["finishReason"] = self.finish_reason
        return out


@dataclass
class DrawingResponse:
    candidates: List[Candidate] = field(default_factory=list)
    usage_metadata: Optional[UsageMetadata] = None
    prompt_feedback: Optional[PromptFeedback] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "DrawingResponse":
        usage = raw.get("usageMetadata")
        feedback = raw.get("promptFeedback")
        return cls(
            candidates=[
                Candidate.from_dict(c, i) for i, c in enumerate(raw.get("candidates") or []) if isinstance(c, dict)
            ],
            usage_metadata=UsageMetadata.from_dict(usage) if isinstance(usage, dict) else None,
            prompt_feedback=(
                PromptFeedback(block_reason=feedback.get("blockReason")) if isinstance(feedback, dict) else None
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"candidates": [c.to_dict() for c in self.candidates]}
        if self.usage_metadata is not None:
            out["usageMetadata"] = self.usage_metadata.to_dict()
        if self.prompt_feedback is not None:
            out["promptFeedback"] = (
                {"blockReason": self.prompt_feedback.block_reason} if self.prompt_feedback.block_reason else {}
            )
        return out


@dataclass
class ThoughtTraceItem:
    type: Literal["text", "image"]
    text: Optional[str] = None
    mime_type: Optional[str] = None
    data: Optional[str] = None


@dataclass
class GeneratedImage:
    """An image extracted from a drawing response, with its provenance."""

    id: str
    image_data: str
    mime_type: str
    prompt: str
    timestamp: int
    generation_config: Dict[str, Any]
    thought_summary: Optional[str] = None
    thought_trace: Optional[List[ThoughtTraceItem]] = None
    usage_metadata: Optional[UsageMetadata] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "imageData": self.image_data,
            "mimeType": self.mime_type,
            "prompt": self.prompt,
            "timestamp": self.timestamp,
            "generationConfig": copy.deepcopy(self.generation_config),
        }
        if self.thought_summary is not None:
            out["thoughtSummary"] = self.thought_summary
        if self.thought_trace is not None:
            out["thoughtTrace"] = [
                {k: v for k, v in (("type", t.type), ("text", t.text), ("mimeType", t.mime_type), ("data", t.data)) if v is not None}
                for t in self.thought_trace
            ]
        if self.usage_metadata is not None:
            out["usageMetadata"] = self.usage_metadata.to_dict()
        return out


@dataclass(frozen=True)
class DrawingStreamDelta:
    text: Optional[str] = None
    thought: Optional[str] = None
    done: bool = False


__all__ = [
    "ImageGenerationConfig",
    "InlineData",
    "DrawingPart",
    "DrawingMessage",
    "UsageMetadata",
    "PromptFeedback",
    "Candidate",
    "DrawingResponse",
    "ThoughtTraceItem",
    "GeneratedImage",
    "DrawingStreamDelta",
]
