"""
Normalized provider outputs.

``AIResponse`` is the buffered result of ``call_api(stream=False)``;
``StreamChunk`` is one decoded unit of streamed output. A chunk with
``done=True`` ends the logical response even if the connection still has
frames.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AIResponse:
    content: str
    finish_reason: Optional[str] = None


@dataclass(frozen=True)
class StreamChunk:
    content: str
    done: bool = False


__all__ = ["AIResponse", "StreamChunk"]
