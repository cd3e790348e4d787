"""Provider capability interfaces (Protocols).

Every adapter satisfies :class:`Provider`: ``call_api`` performs one logical
call (buffered or streamed) and ``parse_stream_chunk`` decodes one SSE
payload. Drawing backends satisfy :class:`DrawingService`. Dispatch between
the concrete variants happens once, in the factory.
"""

from __future__ import annotations

from typing import AsyncIterator, List, Optional, Protocol, Sequence, Union, runtime_checkable

from .cancellation import CancellationToken
from .models import (
    AIResponse,
    APICallParams,
    ChatMessage,
    DrawingMessage,
    DrawingResponse,
    DrawingStreamDelta,
    GeneratedImage,
    ImageGenerationConfig,
    StreamChunk,
)
from .streaming.provider_stream import ProviderStream


@runtime_checkable
class StreamDecoder(Protocol):
    """Pure decoder for one server-sent-event payload."""

    def parse_stream_chunk(self, frame: str) -> Optional[StreamChunk]:
        """Return a chunk, or ``None`` for frames without visible content."""
        ...


@runtime_checkable
class Provider(StreamDecoder, Protocol):
    """Uniform chat contract implemented by every vendor adapter."""

    @property
    def provider_name(self) -> str:
        ...

    @property
    def model_id(self) -> str:
        ...

    async def call_api(
        self,
        messages: Sequence[ChatMessage],
        stream: bool = False,
        params: Optional[APICallParams] = None,
        *,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Union[AIResponse, ProviderStream]:
        """Execute one logical call.

        Raises ``ConfigError`` when base URL or key is missing,
        ``UpstreamError`` on a final non-success status and
        ``EmptyResponseError`` when a buffered response has no text.
        """
        ...

    def stream_chat(
        self,
        messages: Sequence[ChatMessage],
        params: Optional[APICallParams] = None,
        *,
        cancel_token: Optional[CancellationToken] = None,
    ) -> AsyncIterator[StreamChunk]:
        ...


@runtime_checkable
class DrawingService(Protocol):
    """Image/text generation normalized to the candidate/parts shape."""

    async def generate_content(
        self,
        model: str,
        history: Sequence[DrawingMessage],
        config: ImageGenerationConfig,
        supports_image: bool = False,
        cancel_token: Optional[CancellationToken] = None,
        system_prompt: Optional[str] = None,
    ) -> DrawingResponse:
        ...

    def generate_content_stream(
        self,
        model: str,
        history: Sequence[DrawingMessage],
        config: ImageGenerationConfig,
        supports_image: bool = False,
        cancel_token: Optional[CancellationToken] = None,
        system_prompt: Optional[str] = None,
    ) -> AsyncIterator[DrawingStreamDelta]:
        ...

    def extract_images(
        self, response: DrawingResponse, prompt: str, config: ImageGenerationConfig
    ) -> List[GeneratedImage]:
        ...

    def extract_text(self, response: DrawingResponse) -> str:
        ...

    def is_blocked(self, response: DrawingResponse) -> bool:
        ...

    def get_block_reason(self, response: DrawingResponse) -> str:
        ...


__all__ = ["StreamDecoder", "Provider", "DrawingService"]
