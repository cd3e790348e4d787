"""Post-processing for extracted response text.

``clean_response`` removes wrapper artifacts some gateways add around the
model text; ``clean_think_tags`` drops reasoning blocks that models emit
inline (``<think>`` / ``<thinking>``).
"""
from __future__ import annotations

import re

_ZERO_WIDTH = re.compile("[\u200b\u200c\u200d\u2060\ufeff]")
_WRAPPER_LABEL = re.compile(r"^\s*(?:assistant|ai)\s*:\s*", re.IGNORECASE)
_BLANK_RUNS = re.compile(r"\n[ \t]*\n(?:[ \t]*\n)+")
_THINK_BLOCK = re.compile(r"<(think|thinking)\b[^>]*>.*?</\1\s*>", re.DOTALL | re.IGNORECASE)
_UNTERMINATED_LEADING = re.compile(r"^\s*<(think|thinking)\b[^>]*>(?!.*</\1\s*>).*$", re.DOTALL | re.IGNORECASE)
_STRAY_CLOSE = re.compile(r"^\s*</(?:think|thinking)\s*>", re.IGNORECASE)


def clean_response(text: str) -> str:
    """Strip BOM/zero-width characters, a leading ``assistant:`` label and
    surrounding whitespace; collapse runs of three or more newlines."""
    if not text:
        return ""
    cleaned = _ZERO_WIDTH.sub("", text)
    cleaned = _WRAPPER_LABEL.sub("", cleaned, count=1)
    cleaned = _BLANK_RUNS.sub("\n\n", cleaned)
    return cleaned.strip()


def clean_think_tags(text: str) -> str:
    """Remove complete think blocks and an unterminated leading one."""
    if not text:
        return ""
    cleaned = _THINK_BLOCK.sub("", text)
    cleaned = _UNTERMINATED_LEADING.sub("", cleaned)
    cleaned = _STRAY_CLOSE.sub("", cleaned)
    return cleaned.strip()


__all__ = ["clean_response", "clean_think_tags"]
