"""Drawing service for OpenAI-compatible chat endpoints.

Chat Completions output is normalized into the shared candidate/parts shape:

- string content: a data URL, http(s) image URL or bare base64 becomes an
  inline image, anything else a text part;
- array content: ``text`` items, ``image_url``/``image`` items (resolved like
  strings) and ``image_base64`` items;
- ``data[].b64_json`` images (with ``revised_prompt`` as text);
- ``usage`` counters map to usage metadata;
- ``finish_reason == "content_filter"`` becomes ``promptFeedback.blockReason``.

Remote image URLs are fetched with ``httpx``; a failed fetch drops that item.
"""
from __future__ import annotations

import base64
import json
import re
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

import httpx

from ..base.cancellation import CancellationToken
from ..base.drawing import DrawingInspectionMixin
from ..base.http import open_client
from ..base.logging import get_logger, log_event, normalized_log_event
from ..base.models import (
    Candidate,
    DrawingMessage,
    DrawingPart,
    DrawingResponse,
    DrawingStreamDelta,
    ImageGenerationConfig,
    InlineData,
    PromptFeedback,
    ProviderConfig,
    UsageMetadata,
)
from ..base.provider import BaseHttpClient
from ..base.timeouts import resolve_request_timeout
from ..config.defaults import DEFAULT_IMAGE_MIME_TYPE, DONE_SENTINEL, MIN_BASE64_IMAGE_LENGTH
from .openai_chat import resolve_chat_url

_DATA_URL = re.compile(r"^data:(.*?);base64,(.*)$", re.DOTALL)
_BASE64_TEXT = re.compile(r"^[A-Za-z0-9+/=\n\r]+$")

_logger = get_logger("openai.drawing")


def looks_like_base64(text: str) -> bool:
    return len(text) >= MIN_BASE64_IMAGE_LENGTH and bool(_BASE64_TEXT.match(text))


def _image_mime(fallback: Optional[str]) -> str:
    if fallback and fallback.startswith("image/"):
        return fallback
    return DEFAULT_IMAGE_MIME_TYPE


def build_messages(history: Sequence[DrawingMessage], system_prompt: Optional[str] = None) -> List[Dict[str, Any]]:
    """Encode drawing history as Chat Completions messages.

    The custom system prompt and all system turns fold into one leading
    system message; ``model`` turns become ``assistant``. A turn holding a
    single text part is sent as a plain string; empty turns are skipped.
    """
    messages: List[Dict[str, Any]] = []
    system_parts: List[str] = []
    if system_prompt and system_prompt.strip():
        system_parts.append(system_prompt.strip())
    system_text = "\n".join(m.text() for m in history if m.role == "system")
    if system_text:
        system_parts.append(system_text)
    if system_parts:
        messages.append({"role": "system", "content": "\n\n".join(system_parts)})

    for message in history:
        if message.role == "system":
            continue
        content: List[Dict[str, Any]] = []
        for part in message.parts:
            if part.text:
                content.append({"type": "text", "text": part.text})
            if part.inline_data is not None:
                url = f"data:{part.inline_data.mime_type};base64,{part.inline_data.data}"
                content.append({"type": "image_url", "image_url": {"url": url}})
        if not content:
            continue
        role = "assistant" if message.role == "model" else message.role
        if len(content) == 1 and content[0]["type"] == "text":
            messages.append({"role": role, "content": content[0]["text"]})
        else:
            messages.append({"role": role, "content": content})
    return messages


def build_request_body(model: str, messages: List[Dict[str, Any]], config: ImageGenerationConfig) -> Dict[str, Any]:
    body: Dict[str, Any] = {"model": model, "messages": messages}
    if config.temperature is not None:
        body["temperature"] = config.temperature
    if config.top_p is not None:
        body["top_p"] = config.top_p
    if config.max_output_tokens is not None:
        body["max_tokens"] = config.max_output_tokens
    if config.frequency_penalty is not None:
        body["frequency_penalty"] = config.frequency_penalty
    if config.presence_penalty is not None:
        body["presence_penalty"] = config.presence_penalty
    return body


class OpenAIDrawingService(DrawingInspectionMixin, BaseHttpClient):
    """``DrawingService`` over an OpenAI-compatible Chat Completions endpoint."""

    provider_name = "openai"

    def __init__(self, config: ProviderConfig, model_id: Optional[str] = None) -> None:
        super().__init__(config, model_id)
        self._logger = _logger

    async def _fetch_image(self, url: str, fallback_mime: str) -> Optional[InlineData]:
        try:
            async with open_client(resolve_request_timeout(self.model_id)) as client:
                response = await client.get(url)
        except httpx.HTTPError as exc:
            log_event(self._logger, "drawing.image_fetch_failed", self._ctx(url), error=str(exc))
            return None
        if not response.is_success:
            return None
        mime = response.headers.get("content-type") or fallback_mime or DEFAULT_IMAGE_MIME_TYPE
        return InlineData(mime_type=mime, data=base64.b64encode(response.content).decode("ascii"))

    async def parse_image_url(self, url: str, fallback_mime: str) -> Optional[InlineData]:
        """Resolve a data URL, http(s) URL or bare base64 string to inline data."""
        if not url:
            return None
        if url.startswith("data:"):
            match = _DATA_URL.match(url)
            return InlineData(mime_type=match.group(1), data=match.group(2)) if match else None
        if url.startswith("http"):
            return await self._fetch_image(url, fallback_mime)
        if looks_like_base64(url):
            return InlineData(mime_type=_image_mime(fallback_mime), data=url)
        return None

    async def normalize_response(self, data: Dict[str, Any], config: ImageGenerationConfig) -> DrawingResponse:
        parts: List[DrawingPart] = []
        choices = data.get("choices")
        choice = choices[0] if isinstance(choices, list) and choices and isinstance(choices[0], dict) else {}
        message = choice.get("message") if isinstance(choice.get("message"), dict) else {}
        content = message.get("content")
        fallback_mime = config.response_mime_type

        if isinstance(content, list):
            for item in content:
                if not isinstance(item, dict):
                    continue
                kind = item.get("type")
                if kind == "text" and item.get("text"):
                    parts.append(DrawingPart(text=item["text"]))
                    continue
                image_url = item.get("image_url")
                url = image_url.get("url") if isinstance(image_url, dict) else image_url
                if kind in ("image_url", "image") and isinstance(url, str) and url:
                    inline = await self.parse_image_url(url, fallback_mime)
                    if inline is not None:
                        parts.append(DrawingPart(inline_data=inline))
                    continue
                if kind == "image" and item.get("image_base64"):
                    parts.append(
                        DrawingPart(inline_data=InlineData(mime_type=_image_mime(fallback_mime), data=item["image_base64"]))
                    )
        elif isinstance(content, str):
            inline = await self.parse_image_url(content.strip(), fallback_mime)
            if inline is not None:
                parts.append(DrawingPart(inline_data=inline))
            elif content.strip():
                parts.append(DrawingPart(text=content))

        for item in data.get("data") or []:
            if not isinstance(item, dict):
                continue
            if item.get("b64_json"):
                mime = item.get("mime_type") or fallback_mime or DEFAULT_IMAGE_MIME_TYPE
                parts.append(DrawingPart(inline_data=InlineData(mime_type=mime, data=item["b64_json"])))
            if item.get("revised_prompt"):
                parts.append(DrawingPart(text=item["revised_prompt"]))

        usage = data.get("usage")
        usage_metadata = (
            UsageMetadata(
                prompt_token_count=usage.get("prompt_tokens"),
                candidates_token_count=usage.get("completion_tokens"),
                total_token_count=usage.get("total_tokens"),
            )
            if isinstance(usage, dict)
            else None
        )
        finish_reason = choice.get("finish_reason")
        return DrawingResponse(
            candidates=[
                Candidate(parts=parts, role="model", finish_reason=finish_reason, index=int(choice.get("index") or 0))
            ],
            usage_metadata=usage_metadata,
            prompt_feedback=PromptFeedback(block_reason="content_filter") if finish_reason == "content_filter" else None,
        )

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
        url, _ = resolve_chat_url(base_url)
        body = build_request_body(model, build_messages(history, system_prompt), config)
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
        result = await self.normalize_response(data, config)
        normalized_log_event(self._logger, "drawing.end", self._ctx(url), phase="finalize", emitted=True)
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
        url, _ = resolve_chat_url(base_url)
        body = build_request_body(model, build_messages(history, system_prompt), config)
        body["stream"] = True
        response, client = await self._post(
            url, body, stream=True, headers=self._request_headers(api_key), cancel_token=cancel_token, model=model
        )
        if not response.is_success:
            error = self._upstream_error(response, self._error_payload(response))
            self._log_error(url, error, attempt=1)
            raise error
        async with self._open_stream(response, client, cancel_token) as stream:
            async for payload in stream.aiter_payloads():
                if payload == DONE_SENTINEL:
                    break
                try:
                    chunk = json.loads(payload)
                except ValueError:
                    continue
                choices = chunk.get("choices") if isinstance(chunk, dict) else None
                delta = choices[0].get("delta") if isinstance(choices, list) and choices and isinstance(choices[0], dict) else None
                if not isinstance(delta, dict):
                    continue
                content = delta.get("content")
                if isinstance(content, str):
                    if content:
                        yield DrawingStreamDelta(text=content)
                elif isinstance(content, list):
                    for item in content:
                        if isinstance(item, dict) and item.get("type") == "text" and item.get("text"):
                            yield DrawingStreamDelta(text=item["text"])
        yield DrawingStreamDelta(done=True)


__all__ = ["OpenAIDrawingService", "build_messages", "build_request_body", "looks_like_base64"]
