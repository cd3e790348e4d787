"""Gemini wire helpers: endpoint URLs, request bodies and frame decoding.

Gemini exposes ``models/<model>:generateContent`` for buffered calls and
``:streamGenerateContent?alt=sse`` for SSE streams. The key travels in the
``x-goog-api-key`` header. System turns are folded into
``systemInstruction``; ``assistant``/``model`` turns are sent as ``model``.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

from ..base.models import (
    APICallParams,
    ChatMessage,
    DrawingMessage,
    DrawingResponse,
    ImageGenerationConfig,
    StreamChunk,
)
from ..base.utils.attachments import gemini_parts
from ..base.utils.messages import split_system_messages
from ..config.defaults import GEMINI_API_VERSION

API_KEY_HEADER = "x-goog-api-key"


def model_url(base_url: str, model: str, *, stream: bool) -> str:
    """Return the generate (or stream-generate) URL for ``model``."""
    root = base_url.strip().rstrip("/")
    if "/v1" not in root:
        root = f"{root}/{GEMINI_API_VERSION}"
    name = model if model.startswith("models/") else f"models/{model}"
    if stream:
        return f"{root}/{name}:streamGenerateContent?alt=sse"
    return f"{root}/{name}:generateContent"


def headers(api_key: str) -> Dict[str, str]:
    return {"Content-Type": "application/json", API_KEY_HEADER: api_key}


def _wire_role(role: str) -> str:
    return "model" if role in ("assistant", "model") else "user"


def _system_instruction(text: str) -> Optional[Dict[str, Any]]:
    return {"parts": [{"text": text}]} if text else None


def build_chat_body(messages: Sequence[ChatMessage], params: Optional[APICallParams]) -> Dict[str, Any]:
    system_text, rest = split_system_messages(messages)
    body: Dict[str, Any] = {
        "contents": [{"role": _wire_role(m.wire_role), "parts": gemini_parts(m)} for m in rest],
    }
    instruction = _system_instruction(system_text)
    if instruction:
        body["systemInstruction"] = instruction
    generation: Dict[str, Any] = {}
    if params is not None:
        if params.temperature is not None:
            generation["temperature"] = params.temperature
        if params.top_p is not None:
            generation["topP"] = params.top_p
        if params.max_tokens is not None:
            generation["maxOutputTokens"] = params.max_tokens
        if params.frequency_penalty is not None:
            generation["frequencyPenalty"] = params.frequency_penalty
        if params.presence_penalty is not None:
            generation["presencePenalty"] = params.presence_penalty
    if generation:
        body["generationConfig"] = generation
    return body


def build_drawing_body(
    history: Sequence[DrawingMessage],
    config: ImageGenerationConfig,
    *,
    supports_image: bool,
    system_prompt: Optional[str] = None,
) -> Dict[str, Any]:
    system_parts: List[str] = []
    if system_prompt and system_prompt.strip():
        system_parts.append(system_prompt.strip())
    system_parts.extend(m.text() for m in history if m.role == "system" and m.text())
    contents = [
        {"role": _wire_role(m.role), "parts": [p.to_dict() for p in m.parts]}
        for m in history
        if m.role != "system" and m.parts
    ]
    body: Dict[str, Any] = {"contents": contents}
    instruction = _system_instruction("\n\n".join(system_parts))
    if instruction:
        body["systemInstruction"] = instruction
    generation: Dict[str, Any] = {}
    if config.temperature is not None:
        generation["temperature"] = config.temperature
    if config.top_p is not None:
        generation["topP"] = config.top_p
    if config.max_output_tokens is not None:
        generation["maxOutputTokens"] = config.max_output_tokens
    if supports_image:
        generation["responseModalities"] = ["TEXT", "IMAGE"]
    if config.include_thoughts:
        generation["thinkingConfig"] = {"includeThoughts": True}
    if generation:
        body["generationConfig"] = generation
    return body


def load_frame(frame: str) -> Optional[DrawingResponse]:
    data = frame.strip()
    if not data or data.startswith(":"):
        return None
    try:
        parsed = json.loads(data)
    except ValueError:
        return None
    return DrawingResponse.from_dict(parsed) if isinstance(parsed, dict) else None


def parse_gemini_chunk(frame: str) -> Optional[StreamChunk]:
    """Decode one ``streamGenerateContent`` SSE payload (thought parts skipped)."""
    response = load_frame(frame)
    if response is None or not response.candidates:
        return None
    candidate = response.candidates[0]
    text = "".join(p.text for p in candidate.parts if p.text and not p.thought)
    done = bool(candidate.finish_reason)
    if not text and not done:
        return None
    return StreamChunk(content=text, done=done)


__all__ = [
    "API_KEY_HEADER",
    "model_url",
    "headers",
    "build_chat_body",
    "build_drawing_body",
    "load_frame",
    "parse_gemini_chunk",
]
