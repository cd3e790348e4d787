"""OpenAI Responses API adapter (baseline, no corrections).

A straight Responses-only client: every message, system included, goes into
``input``; there is no token-parameter or system-role recovery. Callers that
need those corrections point :class:`OpenAICompletionsProvider` at a
``/responses`` URL instead.
"""

from __future__ import annotations

import time
from typing import Any, Dict, List, Optional, Sequence, Union

from ..base.cancellation import CancellationToken
from ..base.errors import EmptyResponseError
from ..base.logging import normalized_log_event
from ..base.models import AIResponse, APICallParams, ChatMessage, StreamChunk
from ..base.provider import BaseProvider
from ..base.streaming.provider_stream import ProviderStream
from ..base.utils.attachments import responses_content_parts
from ..base.utils.messages import has_multimodal_content
from ..base.utils.response_cleaner import clean_response, clean_think_tags
from ..openai.openai_chat import resolve_responses_url
from ..openai.openai_streaming import parse_responses_chunk


def _encode_input(message: ChatMessage) -> Dict[str, Any]:
    if has_multimodal_content(message):
        return {"role": message.wire_role, "content": responses_content_parts(message)}
    if isinstance(message.content, str):
        return {"role": message.wire_role, "content": message.content}
    return {
        "role": message.wire_role,
        "content": [{"type": "input_text", "text": p.text or ""} for p in message.content if p.type == "text"],
    }


def build_request_body(
    model: str, messages: Sequence[ChatMessage], *, stream: bool, params: Optional[APICallParams]
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"model": model, "input": [_encode_input(m) for m in messages]}
    if stream:
        body["stream"] = True
    if params is None:
        return body
    if params.temperature is not None:
        body["temperature"] = params.temperature
    if params.top_p is not None:
        body["top_p"] = params.top_p
    if params.max_tokens is not None:
        body["max_output_tokens"] = params.max_tokens
    if params.reasoning_effort:
        body["reasoning"] = {"effort": params.reasoning_effort}
    return body


def extract_response_text(data: Any) -> str:
    """``output_text``, then joined ``output_text`` parts, then plain fallbacks."""
    if not isinstance(data, dict):
        return ""
    if isinstance(data.get("output_text"), str):
        return data["output_text"]
    output = data.get("output")
    if isinstance(output, list):
        texts: List[str] = []
        for item in output:
            content = item.get("content") if isinstance(item, dict) else None
            if not isinstance(content, list):
                continue
            texts.extend(
                part["text"]
                for part in content
                if isinstance(part, dict) and part.get("type") == "output_text" and isinstance(part.get("text"), str)
            )
        if texts:
            return "".join(texts)
    choices = data.get("choices")
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        message = choices[0].get("message")
        if isinstance(message, dict) and isinstance(message.get("content"), str) and message["content"]:
            return message["content"]
    if isinstance(data.get("content"), str):
        return data["content"]
    return ""


class OpenAIResponsesProvider(BaseProvider):
    provider_name = "openai-responses"

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
        url = resolve_responses_url(base_url)
        started = time.monotonic()
        normalized_log_event(self._logger, "chat.start", self._ctx(url), phase="start", emitted=False, stream=stream)
        body = build_request_body(self.model_id, messages, stream=stream, params=params)
        response, client = await self._post(
            url, body, stream=stream, headers=self._request_headers(api_key), cancel_token=cancel_token
        )
        if not response.is_success:
            error = self._upstream_error(response, self._error_payload(response))
            self._log_error(url, error, attempt=1)
            raise error
        if stream:
            self._log_end(url, started, attempt=1, stream=True)
            return self._open_stream(response, client, cancel_token)
        try:
            data = response.json()
        except ValueError:
            data = None
        text = extract_response_text(data)
        if not text.strip():
            raise EmptyResponseError(
                "response contained no extractable text", provider=self.provider_name, model=self.model_id
            )
        finish_reason = data.get("finish_reason") if isinstance(data, dict) else None
        self._log_end(url, started, attempt=1, stream=False)
        return AIResponse(content=clean_think_tags(clean_response(text)), finish_reason=finish_reason)

    def parse_stream_chunk(self, frame: str) -> Optional[StreamChunk]:
        return parse_responses_chunk(frame)


__all__ = ["OpenAIResponsesProvider", "build_request_body", "extract_response_text"]
