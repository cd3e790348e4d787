"""
Content part and attachment models for chat messages.

A message's content may be an ordered list of ``ContentPart`` items so text and
images can be interleaved; order is significant and is preserved by every
wire encoder. ``Attachment`` is the looser shape produced by upload widgets: a
base64 payload or URL with a mime type, appended after the message text.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Literal, Optional

ContentPartType = Literal["text", "inline_image", "image_url"]


@dataclass(frozen=True)
class ContentPart:
    """A single piece of message content.

    Attributes:
        type: ``"text"``, ``"inline_image"`` (mime type + base64 data) or
            ``"image_url"`` (remote or data URL).
        text: Text value for text parts.
        mime_type: Image mime type for inline images.
        data: Base64 payload for inline images.
        url: Image URL for URL parts.
    """

    type: ContentPartType
    text: Optional[str] = None
    mime_type: Optional[str] = None
    data: Optional[str] = None
    url: Optional[str] = None

    @classmethod
    def text_part(cls, text: str) -> "ContentPart":
        return cls(type="text", text=text)

    @classmethod
    def inline_image(cls, mime_type: str, data: str) -> "ContentPart":
        return cls(type="inline_image", mime_type=mime_type, data=data)

    @classmethod
    def image_url_part(cls, url: str) -> "ContentPart":
        return cls(type="image_url", url=url)

    def image_url(self) -> Optional[str]:
        """Return a URL for image parts (data URL for inline images)."""
        if self.type == "image_url":
            return self.url
        if self.type == "inline_image" and self.data:
            return f"data:{self.mime_type or 'image/png'};base64,{self.data}"
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass(frozen=True)
class Attachment:
    """A file attached to a message.

    Exactly one of ``data`` (base64 payload) or ``url`` is expected. Text-like
    attachments may carry their decoded contents in ``text`` so encoders can
    inline them as text parts.
    """

    mime_type: str
    data: Optional[str] = None
    url: Optional[str] = None
    name: Optional[str] = None
    text: Optional[str] = None

    @property
    def is_image(self) -> bool:
        return self.mime_type.lower().startswith("image/")

    def data_url(self) -> Optional[str]:
        if self.data:
            return f"data:{self.mime_type};base64,{self.data}"
        return self.url

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Attachment":
        return cls(
            mime_type=str(raw.get("mime_type") or raw.get("mimeType") or "application/octet-stream"),
            data=raw.get("data"),
            url=raw.get("url"),
            name=raw.get("name"),
            text=raw.get("text"),
        )


__all__ = ["ContentPart", "ContentPartType", "Attachment"]
