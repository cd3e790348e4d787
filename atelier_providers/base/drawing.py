"""Response inspection shared by every drawing service.

All drawing backends normalize to :class:`DrawingResponse`, so image and text
extraction and block detection are implemented once here. Thought parts are
excluded from primary output: thought text is collected into a summary and
both thought text and thought images into a per-image thought trace.
"""
from __future__ import annotations

import copy
import time
from typing import List

from .models import DrawingResponse, GeneratedImage, ImageGenerationConfig, ThoughtTraceItem


def extract_images(response: DrawingResponse, prompt: str, config: ImageGenerationConfig) -> List[GeneratedImage]:
    """Collect inline images from every candidate with their thought context.

    Each image records the thoughts seen earlier in the same candidate.
    """
    images: List[GeneratedImage] = []
    for index, candidate in enumerate(response.candidates):
        segments: List[str] = []
        trace: List[ThoughtTraceItem] = []
        for part in candidate.parts:
            if part.thought:
                if part.text is not None:
                    cleaned = part.text.strip()
                    if cleaned:
                        segments.append(cleaned)
                        trace.append(ThoughtTraceItem(type="text", text=cleaned))
                elif part.inline_data is not None:
                    trace.append(
                        ThoughtTraceItem(type="image", mime_type=part.inline_data.mime_type, data=part.inline_data.data)
                    )
                continue
            if part.inline_data is None:
                continue
            timestamp = int(time.time() * 1000)
            images.append(
                GeneratedImage(
                    id=f"{timestamp}-{index}-{len(images)}",
                    image_data=part.inline_data.data,
                    mime_type=part.inline_data.mime_type,
                    prompt=prompt,
                    timestamp=timestamp,
                    generation_config=config.to_wire(),
                    thought_summary="\n\n".join(segments) if segments else None,
                    thought_trace=[copy.copy(item) for item in trace] if trace else None,
                    usage_metadata=copy.deepcopy(response.usage_metadata),
                )
            )
    return images


def extract_text(response: DrawingResponse) -> str:
    """Concatenate the non-thought text of the first candidate."""
    if not response.candidates:
        return ""
    return "".join(p.text for p in response.candidates[0].parts if p.text and not p.thought)


def extract_thoughts(response: DrawingResponse) -> List[str]:
    """Thought text segments of the first candidate, in order."""
    if not response.candidates:
        return []
    return [p.text.strip() for p in response.candidates[0].parts if p.thought and p.text and p.text.strip()]


def is_blocked(response: DrawingResponse) -> bool:
    return bool(response.prompt_feedback and response.prompt_feedback.block_reason)


def get_block_reason(response: DrawingResponse) -> str:
    if not is_blocked(response):
        return ""
    return f"Content blocked: {response.prompt_feedback.block_reason}"  # type: ignore[union-attr]


class DrawingInspectionMixin:
    """Binds the shared inspection helpers as ``DrawingService`` methods."""

    def extract_images(
        self, response: DrawingResponse, prompt: str, config: ImageGenerationConfig
    ) -> List[GeneratedImage]:
        return extract_images(response, prompt, config)

    def extract_text(self, response: DrawingResponse) -> str:
        return extract_text(response)

    def is_blocked(self, response: DrawingResponse) -> bool:
        return is_blocked(response)

    def get_block_reason(self, response: DrawingResponse) -> str:
        return get_block_reason(response)


__all__ = [
    "extract_images",
    "extract_text",
    "extract_thoughts",
    "is_blocked",
    "get_block_reason",
    "DrawingInspectionMixin",
]
