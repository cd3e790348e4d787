"""Streaming package: SSE framing, open-stream ownership, chunk decoding and
text accumulation."""

from .accumulator import Artifact, StreamAccumulator, build_display_text, extract_artifact
from .chunks import stream_chunks
from .provider_stream import ProviderStream
from .sse import SSELineBuffer, sse_payload

__all__ = [
    "Artifact",
    "StreamAccumulator",
    "build_display_text",
    "extract_artifact",
    "stream_chunks",
    "ProviderStream",
    "SSELineBuffer",
    "sse_payload",
]
