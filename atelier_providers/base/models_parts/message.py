"""
Vendor-neutral chat message.

``ChatMessage`` holds a role, either plain text or an ordered list of
``ContentPart`` items, and optional attachments. Role ``model`` is accepted as
a presentation synonym for ``assistant``; ``normalize_role`` folds it before
any wire encoding.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Union

from .content_part import Attachment, ContentPart

Role = Literal["system", "user", "assistant", "model"]


def normalize_role(role: str) -> str:
    """Map presentation roles to wire roles (``model`` -> ``assistant``)."""
    return "assistant" if role == "model" else role


@dataclass
class ChatMessage:
    """A chat message used by every adapter.

    Attributes:
        role: Author role.
        content: Plain text or ordered content parts.
        attachments: Files appended after the content when encoding.
    """

    role: Role
    content: Union[str, List[ContentPart]] = ""
    attachments: List[Attachment] = field(default_factory=list)

    @property
    def wire_role(self) -> str:
        return normalize_role(self.role)

    def is_structured(self) -> bool:
        return isinstance(self.content, list)

    def text(self) -> str:
        """Flattened text of the message (text parts joined by newline)."""
        if isinstance(self.content, str):
            return self.content
        return "\n".join(p.text for p in self.content if p.type == "text" and p.text)

    def has_attachments(self) -> bool:
        return bool(self.attachments)

    def has_images(self) -> bool:
        if any(a.is_image for a in self.attachments):
            return True
        return isinstance(self.content, list) and any(p.type != "text" for p in self.content)

    def is_empty(self) -> bool:
        """True when there is neither text, image parts nor attachments to send."""
        return not self.text().strip() and not self.has_attachments() and not self.has_images()


__all__ = ["ChatMessage", "Role", "normalize_role"]
