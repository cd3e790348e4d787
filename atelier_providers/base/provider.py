"""Shared request execution for HTTP provider adapters.

Purpose:
    ``BaseProvider`` owns what every vendor adapter has in common: the
    immutable :class:`ProviderConfig`, config validation, one timeout-bounded
    POST per attempt, upstream error shaping, and wrapping an open streaming
    response into a :class:`ProviderStream`.

Timeout strategy:
    Each attempt resolves its budget with
    :func:`atelier_providers.base.timeouts.resolve_request_timeout` and gets a
    fresh client, so retries never inherit a partially spent budget.

Failure semantics:
    - Missing base URL or key: ``ConfigError`` before any I/O.
    - Attempt exceeded its budget: ``RequestTimeoutError``.
    - Transport failure before a response: ``ProviderError`` (``unavailable``).
    - Cancellation through the token: ``CancelledError``.
"""

from __future__ import annotations

import asyncio
import json
import time
from typing import Any, AsyncIterator, ClassVar, Dict, Optional, Sequence, Tuple

import httpx

from .cancellation import CancellationToken, await_cancellable
from .errors import ConfigError, ErrorCode, ProviderError, RequestTimeoutError, UpstreamError, classify_status
from .http import json_headers, open_client
from .logging import LogContext, get_logger, normalized_log_event
from .models import APICallParams, ChatMessage, ModelConfig, ProviderConfig, StreamChunk
from .streaming.chunks import stream_chunks
from .streaming.provider_stream import ProviderStream
from .timeouts import resolve_request_timeout


class BaseHttpClient:
    """Config ownership and one-attempt HTTP transport shared by adapters
    and drawing services. ``model_id`` defaults to the config's model.
    """

    provider_name: ClassVar[str] = "base"

    def __init__(self, config: ProviderConfig, model_id: Optional[str] = None) -> None:
        self.config = config
        self._model_id = model_id or config.model_id
        self.model_config: Optional[ModelConfig] = config.find_model(self._model_id)
        self._logger = get_logger(self.provider_name)

    @property
    def model_id(self) -> str:
        return self._model_id

    def _ctx(self, endpoint: Optional[str] = None) -> LogContext:
        return LogContext(provider=self.provider_name, model=self._model_id, endpoint=endpoint)

    # ------------------------------------------------------------------ config
    def _require_config(self) -> Tuple[str, str]:
        """Return (base_url, api_key) or raise ``ConfigError``."""
        base_url = (self.config.base_url or "").strip()
        if not base_url:
            raise ConfigError("API base URL is not configured", provider=self.provider_name, model=self._model_id)
        api_key = (self.config.api_key or "").strip()
        if not api_key:
            raise ConfigError("API key is not configured", provider=self.provider_name, model=self._model_id)
        return base_url, api_key

    def _require_messages(self, messages: Sequence[ChatMessage]) -> None:
        """Reject an empty sequence or any message with neither text nor attachments."""
        if not messages:
            problem = "messages must not be empty"
        else:
            empty = [i for i, m in enumerate(messages) if m.is_empty()]
            if not empty:
                return
            problem = f"message {empty[0]} has no text and no attachments"
        raise ProviderError(
            problem,
            code=ErrorCode.VALIDATION,
            provider=self.provider_name,
            model=self._model_id,
        )

    def _request_headers(self, api_key: str) -> Dict[str, str]:
        return json_headers(api_key)

    # --------------------------------------------------------------- transport
    async def _post(
        self,
        url: str,
        body: Dict[str, Any],
        *,
        stream: bool,
        headers: Dict[str, str],
        cancel_token: Optional[CancellationToken] = None,
        attempt: int = 1,
        model: Optional[str] = None,
    ) -> Tuple[httpx.Response, Optional[httpx.AsyncClient]]:
        """Send one attempt.

        Returns ``(response, client)`` where ``client`` is only set for an
        open successful stream; in every other case the body has been read
        and the client closed.
        """
        timeout = resolve_request_timeout(model or self._model_id)
        client = open_client(timeout)
        keep_open = False
        normalized_log_event(
            self._logger,
            "chat.attempt",
            self._ctx(url),
            phase="start",
            attempt=attempt,
            emitted=False,
            stream=stream,
            timeout_seconds=timeout,
        )
        try:
            request = client.build_request("POST", url, json=body, headers=headers)
            send = asyncio.wait_for(client.send(request, stream=stream), timeout)
            response = await await_cancellable(send, cancel_token)
            if stream and response.is_success:
                keep_open = True
                return response, client
            if stream:
                await response.aread()
                await response.aclose()
            return response, None
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise RequestTimeoutError(
                f"request exceeded {timeout:.0f}s", provider=self.provider_name, model=self._model_id
            ) from exc
        except httpx.TransportError as exc:
            raise ProviderError(
                f"transport error: {exc}",
                code=ErrorCode.UNAVAILABLE,
                provider=self.provider_name,
                model=self._model_id,
            ) from exc
        finally:
            if not keep_open:
                await client.aclose()

    @staticmethod
    def _error_payload(response: httpx.Response) -> Dict[str, Any]:
        """Parse an error body as JSON; ``{}`` when it is not a JSON object."""
        try:
            data = json.loads(response.text or "")
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

    def _upstream_error(self, response: httpx.Response, error_data: Dict[str, Any]) -> UpstreamError:
        reason = response.reason_phrase or ""
        return UpstreamError(
            f"{self.provider_name} API error: {response.status_code} {reason}".strip(),
            status=response.status_code,
            body=response.text,
            error_data=error_data,
            code=classify_status(response.status_code),
            provider=self.provider_name,
            model=self._model_id,
        )

    def _open_stream(
        self,
        response: httpx.Response,
        client: Optional[httpx.AsyncClient],
        cancel_token: Optional[CancellationToken],
    ) -> ProviderStream:
        return ProviderStream(
            response,
            client=client,
            cancel_token=cancel_token,
            provider=self.provider_name,
            model=self._model_id,
        )

    def _log_end(self, url: str, started: float, *, attempt: int, stream: bool, **fields: Any) -> None:
        normalized_log_event(
            self._logger,
            "chat.end",
            self._ctx(url),
            phase="finalize",
            attempt=attempt,
            emitted=True,
            stream=stream,
            latency_ms=int((time.monotonic() - started) * 1000),
            **fields,
        )

    def _log_error(self, url: str, error: ProviderError, *, attempt: int) -> None:
        normalized_log_event(
            self._logger,
            "chat.error",
            self._ctx(url),
            phase="finalize",
            attempt=attempt,
            error_code=error.code.value,
            emitted=False,
            status=getattr(error, "status", None),
        )


class BaseProvider(BaseHttpClient):
    """Common base for chat adapters.

    Subclasses set ``provider_name`` and implement ``call_api`` and
    ``parse_stream_chunk``.
    """

    async def stream_chat(
        self,
        messages: Sequence[ChatMessage],
        params: Optional[APICallParams] = None,
        *,
        cancel_token: Optional[CancellationToken] = None,
    ) -> AsyncIterator[StreamChunk]:
        """Call with ``stream=True`` and yield decoded chunks until done."""
        stream = await self.call_api(messages, True, params, cancel_token=cancel_token)  # type: ignore[attr-defined]
        async for chunk in stream_chunks(self, stream):  # type: ignore[arg-type]
            yield chunk


__all__ = ["BaseHttpClient", "BaseProvider", "await_cancellable"]
