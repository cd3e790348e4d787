"""Conversation controller: the consumer side of the provider contract.

``ConversationController`` keeps an ordered transcript and drives one provider
adapter. It implements the conversation rules the adapters leave to their
caller:

- a new send (or regenerate/resend) cancels the in-flight call and waits for
  it to unwind before starting, so at most one call per conversation runs;
  with several sends queued only the newest reaches the provider;
- editing a message changes its text and discards nothing;
- resending a user message discards every later message, then re-issues the
  call;
- regenerating an assistant message replaces only that message's text, using
  every message strictly before it as the request.

While streaming, each chunk updates the reply's ``text``/``display_text`` and
the latest detected artifact. A provider failure is appended to the reply as
``*Error: ...*`` and re-raised; a cancellation keeps the partial text and
returns normally.
"""
from __future__ import annotations

import asyncio
import contextlib
import time
import uuid
from dataclasses import dataclass, field
from typing import AsyncIterator, List, Literal, Optional, Sequence

from ..base.cancellation import CancellationToken, CancelledError
from ..base.errors import ProviderError
from ..base.interfaces import Provider
from ..base.logging import LogContext, get_logger, log_event
from ..base.models import APICallParams, Attachment, ChatMessage
from ..base.streaming.accumulator import Artifact, StreamAccumulator, extract_artifact

_logger = get_logger("conversation")


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class ConversationMessage:
    """One transcript entry as shown to the user."""

    role: Literal["user", "model"]
    text: str = ""
    id: str = field(default_factory=_new_id)
    display_text: str = ""
    is_streaming: bool = False
    attachments: List[Attachment] = field(default_factory=list)
    error: Optional[str] = None
    timestamp: float = field(default_factory=time.time)

    def to_chat_message(self) -> ChatMessage:
        role = "assistant" if self.role == "model" else "user"
        return ChatMessage(role=role, content=self.text, attachments=list(self.attachments))


class ConversationController:
    """Serializes calls for one conversation against one provider."""

    def __init__(
        self,
        provider: Provider,
        system_prompt: str = "",
        stream: bool = True,
        params: Optional[APICallParams] = None,
    ) -> None:
        self.provider = provider
        self.system_prompt = system_prompt
        self.stream = stream
        self.params = params
        self.messages: List[ConversationMessage] = []
        self.current_artifact: Optional[Artifact] = None
        self._lock = asyncio.Lock()
        self._waiting = 0
        self._token: Optional[CancellationToken] = None

    @property
    def is_streaming(self) -> bool:
        return self._token is not None

    def _ctx(self) -> LogContext:
        return LogContext(provider=self.provider.provider_name, model=self.provider.model_id)

    def build_payload(self, history: Sequence[ConversationMessage]) -> List[ChatMessage]:
        """Neutral request messages: system prompt first, then the history.

        Entries with neither text nor attachments (a reply cancelled before
        its first chunk) are left out.
        """
        payload: List[ChatMessage] = []
        if self.system_prompt and self.system_prompt.strip():
            payload.append(ChatMessage(role="system", content=self.system_prompt))
        payload.extend(m.to_chat_message() for m in history if m.text.strip() or m.attachments)
        return payload

    def cancel(self, reason: str = "cancelled by user") -> None:
        """Cancel the in-flight call, if any."""
        if self._token is not None:
            self._token.cancel(reason)

    def clear(self) -> None:
        self.cancel("conversation cleared")
        self.messages = []
        self.current_artifact = None

    @contextlib.asynccontextmanager
    async def _turn(self, reason: str) -> AsyncIterator[None]:
        """Supersede the running call, then hold the conversation.

        While a caller waits here, any call that starts ahead of it is
        cancelled before reaching the provider.
        """
        self._waiting += 1
        self.cancel(reason)
        try:
            await self._lock.acquire()
        finally:
            self._waiting -= 1
        try:
            yield
        finally:
            self._lock.release()

    def edit(self, index: int, text: str) -> ConversationMessage:
        message = self.messages[index]
        message.text = text
        message.display_text = text
        return message

    async def send(self, text: str, attachments: Optional[List[Attachment]] = None) -> ConversationMessage:
        """Append a user message and produce the assistant reply."""
        text = text.strip()
        if not text and not attachments:
            raise ValueError("message must have text or attachments")
        async with self._turn("superseded by a new message"):
            self.messages.append(ConversationMessage(role="user", text=text, attachments=list(attachments or [])))
            reply = ConversationMessage(role="model", is_streaming=True)
            history = list(self.messages)
            self.messages.append(reply)
            await self._run(reply, history)
            return reply

    async def regenerate(self, index: int) -> ConversationMessage:
        """Re-issue the call for the assistant message at ``index``."""
        async with self._turn("superseded by regenerate"):
            reply = self.messages[index]
            if reply.role != "model":
                raise ValueError("only assistant messages can be regenerated")
            reply.text = ""
            reply.display_text = ""
            reply.error = None
            reply.is_streaming = True
            await self._run(reply, self.messages[:index])
            return reply

    async def resend(self, index: int) -> ConversationMessage:
        """Drop everything after the user message at ``index`` and call again."""
        async with self._turn("superseded by resend"):
            if self.messages[index].role != "user":
                raise ValueError("only user messages can be resent")
            del self.messages[index + 1:]
            reply = ConversationMessage(role="model", is_streaming=True)
            history = list(self.messages)
            self.messages.append(reply)
            await self._run(reply, history)
            return reply

    async def _run(self, reply: ConversationMessage, history: Sequence[ConversationMessage]) -> None:
        token = CancellationToken()
        self._token = token
        if self._waiting:
            token.cancel("superseded by a newer request")
        payload = self.build_payload(history)
        log_event(_logger, "conversation.call", self._ctx(), stream=self.stream, messages=len(payload))
        try:
            token.raise_if_cancelled()
            if self.stream:
                await self._consume_stream(reply, payload, token)
            else:
                result = await self.provider.call_api(payload, False, self.params, cancel_token=token)
                reply.text = result.content
                artifact = extract_artifact(result.content)
                if artifact is not None:
                    self.current_artifact = artifact
        except CancelledError as exc:
            log_event(_logger, "conversation.cancelled", self._ctx(), reason=str(exc))
        except ProviderError as exc:
            reply.error = exc.message
            reply.text += f"\n\n*Error: {exc.message}*"
            raise
        finally:
            reply.is_streaming = False
            reply.display_text = reply.text
            if self._token is token:
                self._token = None

    async def _consume_stream(
        self, reply: ConversationMessage, payload: List[ChatMessage], token: CancellationToken
    ) -> None:
        accumulator = StreamAccumulator()
        async for chunk in self.provider.stream_chat(payload, self.params, cancel_token=token):
            if chunk.content:
                reply.display_text = accumulator.append(chunk.content)
                reply.text = accumulator.text
                if accumulator.artifact is not None:
                    self.current_artifact = accumulator.artifact


__all__ = ["ConversationController", "ConversationMessage"]
