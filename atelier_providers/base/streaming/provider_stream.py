"""Open streaming response returned by ``call_api(stream=True)``.

Purpose
-------
``ProviderStream`` is the "byte stream" half of the provider contract. It owns
the open ``httpx.Response`` and the client that produced it, and offers raw
bytes (``aiter_bytes``) or decoded SSE payloads (``aiter_payloads``).

Failure modes
-------------
- A transport failure after the stream opened raises
  :class:`StreamInterruptedError` so consumers can tell a broken connection
  from a finished response.
- Cancelling the attached :class:`CancellationToken` abandons a pending read,
  releases the connection and raises :class:`CancelledError`. Only the inner
  read is interrupted; the consuming task is never cancelled.

Resources are released by ``aclose`` (idempotent) or by using the stream as an
async context manager.
"""
from __future__ import annotations

import codecs
import contextlib
from typing import AsyncIterator, Optional

import httpx

from ..cancellation import CancellationToken, CancelledError, await_cancellable
from ..errors import StreamInterruptedError
from ..logging import LogContext, get_logger, normalized_log_event
from .sse import SSELineBuffer, sse_payload

_logger = get_logger("streaming")


async def _next_chunk(iterator: AsyncIterator[bytes]) -> Optional[bytes]:
    try:
        return await iterator.__anext__()
    except StopAsyncIteration:
        return None


class ProviderStream:
    """Async byte/payload iterator over one open streaming response."""

    def __init__(
        self,
        response: httpx.Response,
        *,
        client: Optional[httpx.AsyncClient] = None,
        cancel_token: Optional[CancellationToken] = None,
        provider: str = "unknown",
        model: Optional[str] = None,
    ) -> None:
        self._response = response
        self._client = client
        self._token = cancel_token
        self._closed = False
        self.provider = provider
        self.model = model

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def closed(self) -> bool:
        return self._closed

    def _ctx(self) -> LogContext:
        return LogContext(provider=self.provider, model=self.model)

    async def aiter_bytes(self) -> AsyncIterator[bytes]:
        """Yield raw body bytes until EOF, cancellation or transport failure."""
        iterator = self._response.aiter_bytes().__aiter__()
        try:
            while True:
                if self._token is not None:
                    self._token.raise_if_cancelled()
                try:
                    chunk = await await_cancellable(_next_chunk(iterator), self._token, reason="stream cancelled")
                except httpx.TransportError as exc:
                    if self._token is not None and self._token.cancelled:
                        raise CancelledError(self._cancel_reason()) from exc
                    normalized_log_event(
                        _logger,
                        "stream.error",
                        self._ctx(),
                        phase="stream",
                        error_code="transient",
                        emitted=True,
                        error=str(exc),
                    )
                    raise StreamInterruptedError(
                        f"stream interrupted: {exc}", provider=self.provider, model=self.model
                    ) from exc
                if chunk is None:
                    return
                if self._token is not None:
                    self._token.raise_if_cancelled()
                yield chunk
        finally:
            await self.aclose()

    async def aiter_payloads(self) -> AsyncIterator[str]:
        """Yield SSE payloads (``data:`` values and ``:`` comments) in order.

        The token is checked before every payload, so a cancel takes effect
        even between frames that arrived in the same network read.
        """
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        buffer = SSELineBuffer()
        async for raw in self.aiter_bytes():
            for line in buffer.feed(decoder.decode(raw)):
                payload = sse_payload(line)
                if payload is not None:
                    if self._token is not None:
                        self._token.raise_if_cancelled()
                    yield payload
        for line in buffer.feed(decoder.decode(b"", final=True)) + buffer.flush():
            payload = sse_payload(line)
            if payload is not None:
                yield payload

    def _cancel_reason(self) -> str:
        reason = self._token.reason if self._token is not None else None
        return reason or "stream cancelled"

    async def aclose(self) -> None:
        """Release the response and its client (safe to call repeatedly)."""
        if self._closed:
            return
        self._closed = True
        with contextlib.suppress(httpx.HTTPError):
            await self._response.aclose()
        if self._client is not None:
            with contextlib.suppress(httpx.HTTPError):
                await self._client.aclose()

    async def __aenter__(self) -> "ProviderStream":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()


__all__ = ["ProviderStream"]
