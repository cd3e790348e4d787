"""Gemini chat adapter over the native REST API.

Implements the provider contract (``call_api`` / ``parse_stream_chunk``)
against ``generateContent``. Thought parts never reach the primary text. A
structurally successful response whose prompt was blocked carries no text;
it surfaces as ``EmptyResponseError`` naming the block reason.
"""

from __future__ import annotations

import time
from typing import Dict, Optional, Sequence, Union

from ..base.cancellation import CancellationToken
from ..base.drawing import extract_text, get_block_reason
from ..base.errors import EmptyResponseError
from ..base.logging import normalized_log_event
from ..base.models import AIResponse, APICallParams, ChatMessage, DrawingResponse, StreamChunk
from ..base.provider import BaseProvider
from ..base.streaming.provider_stream import ProviderStream
from ..base.utils.response_cleaner import clean_response, clean_think_tags
from .gemini_chat import build_chat_body, headers, model_url, parse_gemini_chunk


class GeminiProvider(BaseProvider):
    provider_name = "gemini"

    def _request_headers(self, api_key: str) -> Dict[str, str]:
        return headers(api_key)

    async def call_api(
        self,
        messages: Sequence[ChatMessage],
        stream: bool = False,
        params: Optional[APICallParams] = None,
        *,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Union[AIResponse, ProviderStream]:
        base_url, api_key = self._require_config()
        self._require_messages(messages)
        url = model_url(base_url, self.model_id, stream=stream)
        started = time.monotonic()
        normalized_log_event(self._logger, "chat.start", self._ctx(url), phase="start", emitted=False, stream=stream)
        response, client = await self._post(
            url,
            build_chat_body(messages, params),
            stream=stream,
            headers=self._request_headers(api_key),
            cancel_token=cancel_token,
        )
        if not response.is_success:
            error = self._upstream_error(response, self._error_payload(response))
            self._log_error(url, error, attempt=1)
            raise error
        if stream:
            self._log_end(url, started, attempt=1, stream=True)
            return self._open_stream(response, client, cancel_token)

        parsed = DrawingResponse.from_dict(self._error_payload(response))
        text = extract_text(parsed)
        if not text.strip():
            reason = get_block_reason(parsed)
            raise EmptyResponseError(
                reason or "response contained no extractable text", provider=self.provider_name, model=self.model_id
            )
        finish_reason = parsed.candidates[0].finish_reason if parsed.candidates else None
        self._log_end(url, started, attempt=1, stream=False, finish_reason=finish_reason)
        return AIResponse(content=clean_think_tags(clean_response(text)), finish_reason=finish_reason)

    def parse_stream_chunk(self, frame: str) -> Optional[StreamChunk]:
        return parse_gemini_chunk(frame)


__all__ = ["GeminiProvider"]
