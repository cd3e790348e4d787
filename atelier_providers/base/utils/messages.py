"""Message-list helpers shared by the OpenAI-style adapters.

``merge_system_messages`` is the recovery step used when an upstream rejects
the ``system`` role (or Responses ``instructions``): every system message is
folded into a ``System:`` preamble on the first user turn.
"""
from __future__ import annotations

from dataclasses import replace
from typing import List, Sequence, Tuple

from ..models import ChatMessage, ContentPart


def stringify_message_content(message: ChatMessage) -> str:
    """Return the message text; part lists join their text parts by newline."""
    return message.text()


def has_multimodal_content(message: ChatMessage) -> bool:
    """True when the message must be encoded as a typed part list."""
    return message.has_attachments() or (
        isinstance(message.content, list) and any(p.type != "text" for p in message.content)
    )


def has_system_message(messages: Sequence[ChatMessage]) -> bool:
    return any(m.role == "system" for m in messages)


def split_system_messages(messages: Sequence[ChatMessage]) -> Tuple[str, List[ChatMessage]]:
    """Return (system texts joined by a blank line, non-system messages)."""
    system_text = "\n\n".join(
        text for text in (stringify_message_content(m) for m in messages if m.role == "system") if text
    )
    return system_text, [m for m in messages if m.role != "system"]


def merge_system_messages(messages: Sequence[ChatMessage]) -> List[ChatMessage]:
    """Fold all system messages into the first user turn.

    Returns the input unchanged when it has no system messages. The merged
    text is ``"System:\\n<system texts>"``; it prefixes the first non-system
    message when that message is from the user, otherwise it is prepended as a
    standalone user message. Attachments and image parts of the first user
    message are kept.
    """
    if not has_system_message(messages):
        return list(messages)
    system_text, rest = split_system_messages(messages)
    if not system_text:
        return rest
    preamble = f"System:\n{system_text}"
    if not rest:
        return [ChatMessage(role="user", content=preamble)]
    first = rest[0]
    if first.role != "user":
        return [ChatMessage(role="user", content=preamble), *rest]
    if has_multimodal_content(first) and isinstance(first.content, list):
        merged_parts = [ContentPart.text_part(preamble), *first.content]
        return [replace(first, content=merged_parts), *rest[1:]]
    merged = f"{preamble}\n\n{stringify_message_content(first)}".strip()
    return [replace(first, content=merged), *rest[1:]]


__all__ = [
    "stringify_message_content",
    "has_multimodal_content",
    "has_system_message",
    "split_system_messages",
    "merge_system_messages",
]
