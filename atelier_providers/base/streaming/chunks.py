"""Decode an open provider stream into normalized ``StreamChunk`` items."""
from __future__ import annotations

from typing import TYPE_CHECKING, AsyncIterator

from ..cancellation import CancelledError
from ..logging import LogContext, get_logger, normalized_log_event
from ..models import StreamChunk
from .provider_stream import ProviderStream

if TYPE_CHECKING:
    from ..interfaces import StreamDecoder

_logger = get_logger("streaming")


async def stream_chunks(decoder: "StreamDecoder", stream: ProviderStream) -> AsyncIterator[StreamChunk]:
    """Yield decoded chunks from ``stream`` using ``decoder.parse_stream_chunk``.

    Frames decoding to ``None`` are skipped. Iteration ends after the first
    chunk with ``done=True``; trailing frames are discarded. The stream is
    always closed on exit, including on error or cancellation.
    """
    ctx = LogContext(provider=stream.provider, model=stream.model)
    emitted = 0
    normalized_log_event(_logger, "stream.start", ctx, phase="stream", emitted=False)
    try:
        async with stream:
            async for payload in stream.aiter_payloads():
                chunk = decoder.parse_stream_chunk(payload)
                if chunk is None:
                    continue
                if chunk.content:
                    emitted += 1
                yield chunk
                if chunk.done:
                    break
    except CancelledError:
        normalized_log_event(
            _logger, "stream.cancelled", ctx, phase="stream", error_code="cancelled", emitted=emitted > 0
        )
        raise
    normalized_log_event(_logger, "stream.end", ctx, phase="finalize", emitted=emitted > 0, chunks=emitted)


__all__ = ["stream_chunks"]
