"""Stream frame decoding for OpenAI-compatible endpoints.

``parse_completions_chunk`` understands every frame shape an OpenAI-style
gateway may emit on one connection: the ``[DONE]`` sentinel, vendor
processing comments, Responses events (``output_text.done`` ends the stream
without repeating its text), Completions deltas, Gemini-style
candidates and bare ``delta.text``/``text`` payloads. It never raises: frames
that are unparsable or carry no visible content decode to ``None``.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Optional

from ..base.models import StreamChunk
from ..config.defaults import DONE_SENTINEL, OPENROUTER_PROCESSING_COMMENT

from .openai_chat import candidate_parts_text


def _load_frame(frame: str) -> Optional[Dict[str, Any]]:
    try:
        parsed = json.loads(frame)
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


def is_status_comment(frame: str) -> bool:
    """True for vendor keep-alive comments such as ``: OPENROUTER PROCESSING``."""
    if frame == OPENROUTER_PROCESSING_COMMENT:
        return True
    return frame.startswith(": ") and "PROCESSING" in frame.upper()


def _event_type(parsed: Dict[str, Any]) -> str:
    kind = parsed.get("type")
    return kind if isinstance(kind, str) else ""


def _first_choice(parsed: Dict[str, Any]) -> Dict[str, Any]:
    choices = parsed.get("choices")
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        return choices[0]
    return {}


def _content_of(parsed: Dict[str, Any]) -> Optional[str]:
    kind = _event_type(parsed)
    if "response.output_text.delta" in kind and isinstance(parsed.get("delta"), str):
        return parsed["delta"]
    delta = _first_choice(parsed).get("delta")
    if isinstance(delta, dict) and isinstance(delta.get("content"), str) and delta["content"]:
        return delta["content"]
    from_candidates = candidate_parts_text(parsed)
    if from_candidates:
        return from_candidates
    generic = parsed.get("delta")
    if isinstance(generic, dict) and isinstance(generic.get("text"), str) and generic["text"]:
        return generic["text"]
    if isinstance(parsed.get("text"), str) and parsed["text"]:
        return parsed["text"]
    return None


def parse_completions_chunk(frame: str) -> Optional[StreamChunk]:
    """Decode one SSE payload into a :class:`StreamChunk` or ``None``."""
    data = frame.strip()
    if not data:
        return None
    if data == DONE_SENTINEL:
        return StreamChunk(content="", done=True)
    if is_status_comment(frame) or data.startswith(":"):
        return None
    parsed = _load_frame(data)
    if parsed is None:
        return None
    # The done event repeats the full text already sent as deltas.
    if "response.output_text.done" in _event_type(parsed):
        return StreamChunk(content="", done=True)
    content = _content_of(parsed) or ""
    done = bool(
        _first_choice(parsed).get("finish_reason")
        or parsed.get("done")
        or "response.completed" in _event_type(parsed)
    )
    if not content and not done:
        return None
    return StreamChunk(content=content, done=done)


def parse_responses_chunk(frame: str) -> Optional[StreamChunk]:
    """Decoder for the Responses-only adapter (delta and completion events)."""
    data = frame.strip()
    if not data or data.startswith(":"):
        return None
    if data == DONE_SENTINEL:
        return StreamChunk(content="", done=True)
    parsed = _load_frame(data)
    if parsed is None:
        return None
    kind = _event_type(parsed)
    if kind == "response.output_text.delta" and isinstance(parsed.get("delta"), str):
        return StreamChunk(content=parsed["delta"], done=False)
    if kind in ("response.output_text.done", "response.completed"):
        return StreamChunk(content="", done=True)
    delta = parsed.get("delta")
    if isinstance(delta, dict) and isinstance(delta.get("text"), str):
        return StreamChunk(content=delta["text"], done=False)
    return None


__all__ = ["is_status_comment", "parse_completions_chunk", "parse_responses_chunk"]
