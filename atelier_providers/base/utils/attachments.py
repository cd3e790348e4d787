"""Wire encoders for multimodal message content.

Each encoder walks the message content in order (text and image parts stay
interleaved) and then appends the attachments. Image attachments become the
vendor's image part; text-like attachments carrying decoded ``text`` are
inlined as text parts. A message with attachments but no text still encodes
to a non-empty part list: attachments that cannot be represented are named
in a short text part instead of being dropped silently.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..models import Attachment, ChatMessage, ContentPart


def _attachment_label(attachment: Attachment) -> str:
    return f"[attachment: {attachment.name or attachment.mime_type}]"


def _attachment_text(attachment: Attachment) -> Optional[str]:
    if attachment.text is None:
        return None
    if attachment.name:
        return f"{attachment.name}:\n{attachment.text}"
    return attachment.text


def _leading_text(message: ChatMessage) -> Optional[str]:
    if isinstance(message.content, str) and message.content.strip():
        return message.content
    return None


def openai_content_parts(message: ChatMessage) -> List[Dict[str, Any]]:
    """Encode for Chat Completions (``text`` / ``image_url`` parts)."""
    parts: List[Dict[str, Any]] = []
    text = _leading_text(message)
    if text is not None:
        parts.append({"type": "text", "text": text})
    elif isinstance(message.content, list):
        for part in message.content:
            if part.type == "text":
                if part.text:
                    parts.append({"type": "text", "text": part.text})
                continue
            url = part.image_url()
            if url:
                parts.append({"type": "image_url", "image_url": {"url": url}})
    for attachment in message.attachments:
        if attachment.is_image and attachment.data_url():
            parts.append({"type": "image_url", "image_url": {"url": attachment.data_url()}})
            continue
        inline = _attachment_text(attachment)
        parts.append({"type": "text", "text": inline if inline is not None else _attachment_label(attachment)})
    if not parts:
        parts.append({"type": "text", "text": ""})
    return parts


def responses_content_parts(message: ChatMessage) -> List[Dict[str, Any]]:
    """Encode for the Responses API (``input_text`` / ``input_image`` parts)."""
    converted: List[Dict[str, Any]] = []
    for part in openai_content_parts(message):
        if part["type"] == "image_url":
            converted.append({"type": "input_image", "image_url": part["image_url"]["url"]})
        else:
            converted.append({"type": "input_text", "text": part["text"]})
    return converted


def _gemini_image_part(part: ContentPart) -> Optional[Dict[str, Any]]:
    if part.type == "inline_image" and part.data:
        return {"inlineData": {"mimeType": part.mime_type or "image/png", "data": part.data}}
    if part.type == "image_url" and part.url:
        return {"fileData": {"mimeType": part.mime_type or "image/*", "fileUri": part.url}}
    return None


def gemini_parts(message: ChatMessage) -> List[Dict[str, Any]]:
    """Encode for Gemini ``contents[].parts`` (``text`` / ``inlineData`` / ``fileData``)."""
    parts: List[Dict[str, Any]] = []
    if isinstance(message.content, str):
        if message.content.strip():
            parts.append({"text": message.content})
    else:
        for part in message.content:
            if part.type == "text":
                if part.text:
                    parts.append({"text": part.text})
                continue
            image = _gemini_image_part(part)
            if image is not None:
                parts.append(image)
    for attachment in message.attachments:
        if attachment.is_image and attachment.data:
            parts.append({"inlineData": {"mimeType": attachment.mime_type, "data": attachment.data}})
        elif attachment.is_image and attachment.url:
            parts.append({"fileData": {"mimeType": attachment.mime_type, "fileUri": attachment.url}})
        else:
            inline = _attachment_text(attachment)
            parts.append({"text": inline if inline is not None else _attachment_label(attachment)})
    if not parts:
        parts.append({"text": ""})
    return parts


__all__ = ["openai_content_parts", "responses_content_parts", "gemini_parts"]
