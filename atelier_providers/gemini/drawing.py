"""Native Gemini drawing service.

Gemini already answers in the candidate/parts shape, so responses are parsed
straight into :class:`DrawingResponse`. Image output is requested with
``responseModalities`` when the model supports it. Block reasons are left on
the response for the caller to inspect.
"""

from __future__ import annotations

from typing import AsyncIterator, Dict, Optional, Sequence

from ..base.cancellation import CancellationToken
from ..base.drawing import DrawingInspectionMixin
from ..base.logging import normalized_log_event
from ..base.models import (
    DrawingMessage,
    DrawingResponse,
    DrawingStreamDelta,
    ImageGenerationConfig,
)
from ..base.provider import BaseHttpClient
from .gemini_chat import build_drawing_body, headers, load_frame, model_url


class GeminiDrawingService(DrawingInspectionMixin, BaseHttpClient):
    """``DrawingService`` over ``generateContent`` / ``streamGenerateContent``."""

    provider_name = "gemini"

    def _request_headers(self, api_key: str) -> Dict[str, str]:
        return headers(api_key)

    async def generate_content(
        self,
        model: str,
        history: Sequence[DrawingMessage],
        config: ImageGenerationConfig,
        supports_image: bool = False,
        cancel_token: Optional[CancellationToken] = None,
        system_prompt: Optional[str] = None,
    ) -> DrawingResponse:
        base_url, api_key = self._require_config()
        url = model_url(base_url, model, stream=False)
        body = build_drawing_body(history, config, supports_image=supports_image, system_prompt=system_prompt)
        normalized_log_event(
            self._logger, "drawing.start", self._ctx(url), phase="start", emitted=False, turns=len(history)
        )
        response, _client = await self._post(
            url, body, stream=False, headers=self._request_headers(api_key), cancel_token=cancel_token, model=model
        )
        data = self._error_payload(response)
        if not response.is_success:
            error = self._upstream_error(response, data)
            self._log_error(url, error, attempt=1)
            raise error
        result = DrawingResponse.from_dict(data)
        normalized_log_event(
            self._logger,
            "drawing.end",
            self._ctx(url),
            phase="finalize",
            emitted=True,
            candidates=len(result.candidates),
            blocked=self.is_blocked(result),
        )
        return result

    async def generate_content_stream(
        self,
        model: str,
        history: Sequence[DrawingMessage],
        config: ImageGenerationConfig,
        supports_image: bool = False,
        cancel_token: Optional[CancellationToken] = None,
        system_prompt: Optional[str] = None,
    ) -> AsyncIterator[DrawingStreamDelta]:
        base_url, api_key = self._require_config()
        url = model_url(base_url, model, stream=True)
        body = build_drawing_body(history, config, supports_image=supports_image, system_prompt=system_prompt)
        response, client = await self._post(
            url, body, stream=True, headers=self._request_headers(api_key), cancel_token=cancel_token, model=model
        )
        if not response.is_success:
            error = self._upstream_error(response, self._error_payload(response))
            self._log_error(url, error, attempt=1)
            raise error
        async with self._open_stream(response, client, cancel_token) as stream:
            async for payload in stream.aiter_payloads():
                frame = load_frame(payload)
                if frame is None or not frame.candidates:
                    continue
                for part in frame.candidates[0].parts:
                    if not part.text:
                        continue
                    if part.thought:
                        yield DrawingStreamDelta(thought=part.text)
                    else:
                        yield DrawingStreamDelta(text=part.text)
        yield DrawingStreamDelta(done=True)


__all__ = ["GeminiDrawingService"]
