"""OpenAI Chat Completions adapter (with Responses companion mode).

Purpose:
    ``OpenAICompletionsProvider`` talks to any OpenAI-compatible endpoint.
    The configured base URL selects the wire format once per call: a URL
    mentioning ``/responses`` uses the Responses body, anything else the Chat
    Completions body (see :func:`resolve_chat_url`).

Retry semantics:
    The call loops until success, an unrecognized failure, or both known
    corrections have been spent:

    - token-parameter correction: switch ``max_tokens`` to
      ``max_completion_tokens``; the switch is remembered on the instance for
      later calls;
    - system-role correction: merge system messages into the first user turn
      (Completions: role rejected; Responses: instructions rejected).

    Each correction can fire at most once per call because the corrected
    request no longer matches its trigger. Every attempt gets a fresh timeout.

Failure semantics:
    ``ConfigError`` (no base URL / key), ``UpstreamError`` (final non-success
    status, with raw body), ``EmptyResponseError`` (buffered success with no
    text). Stream frames are decoded by :meth:`parse_stream_chunk`, which never
    raises.
"""

from __future__ import annotations

import time
from typing import List, Optional, Sequence, Union

from ..base.cancellation import CancellationToken
from ..base.logging import normalized_log_event
from ..base.models import AIResponse, APICallParams, ChatMessage, ProviderConfig, StreamChunk
from ..base.provider import BaseProvider
from ..base.streaming.provider_stream import ProviderStream
from ..base.utils.messages import merge_system_messages
from ..config.defaults import MAX_COMPLETION_TOKENS_PARAM
from .openai_chat import build_ai_response, build_completions_body, build_responses_body, resolve_chat_url
from .openai_streaming import parse_completions_chunk
from .retry_policy import (
    initial_max_tokens_param,
    should_retry_with_completion_tokens,
    should_retry_without_instructions,
    should_retry_without_system_role,
)


class OpenAICompletionsProvider(BaseProvider):
    """Adapter for OpenAI-compatible Chat Completions / Responses endpoints.

    Attributes:
        max_tokens_param: The learned token-limit field name. Starts from the
            model capability config or the model-id heuristic and is updated
            after a successful corrected call.
    """

    provider_name = "openai"

    def __init__(self, config: ProviderConfig, model_id: Optional[str] = None) -> None:
        super().__init__(config, model_id)
        self.max_tokens_param: str = initial_max_tokens_param(self.model_id, self.model_config)

    def _log_retry(self, url: str, attempt: int, correction: str) -> None:
        normalized_log_event(
            self._logger,
            "retry.attempt",
            self._ctx(url),
            phase="retry",
            attempt=attempt,
            emitted=False,
            correction=correction,
        )

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
        url, responses_mode = resolve_chat_url(base_url)
        headers = self._request_headers(api_key)
        system_retry = should_retry_without_instructions if responses_mode else should_retry_without_system_role

        current_param = self.max_tokens_param
        request_messages: List[ChatMessage] = list(messages)
        started = time.monotonic()
        attempt = 0
        normalized_log_event(
            self._logger,
            "chat.start",
            self._ctx(url),
            phase="start",
            emitted=False,
            stream=stream,
            responses_mode=responses_mode,
            messages=len(request_messages),
        )
        while True:
            attempt += 1
            if responses_mode:
                body = build_responses_body(self.model_id, request_messages, stream=stream, params=params)
            else:
                body = build_completions_body(
                    self.model_id, request_messages, stream=stream, params=params, max_tokens_param=current_param
                )
            response, client = await self._post(
                url, body, stream=stream, headers=headers, cancel_token=cancel_token, attempt=attempt
            )

            if not response.is_success:
                error_data = self._error_payload(response)
                if should_retry_with_completion_tokens(error_data, current_param):
                    current_param = MAX_COMPLETION_TOKENS_PARAM
                    self.max_tokens_param = current_param
                    self._log_retry(url, attempt, MAX_COMPLETION_TOKENS_PARAM)
                    continue
                if system_retry(error_data, request_messages):
                    request_messages = merge_system_messages(request_messages)
                    self._log_retry(url, attempt, "merge_system")
                    continue
                error = self._upstream_error(response, error_data)
                self._log_error(url, error, attempt=attempt)
                raise error

            self.max_tokens_param = current_param
            if stream:
                self._log_end(url, started, attempt=attempt, stream=True)
                return self._open_stream(response, client, cancel_token)
            try:
                data = response.json()
            except ValueError:
                data = None
            result = build_ai_response(data, provider=self.provider_name, model=self.model_id)
            self._log_end(url, started, attempt=attempt, stream=False, finish_reason=result.finish_reason)
            return result

    def parse_stream_chunk(self, frame: str) -> Optional[StreamChunk]:
        return parse_completions_chunk(frame)


__all__ = ["OpenAICompletionsProvider"]
