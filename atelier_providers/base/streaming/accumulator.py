"""
Streaming text accumulation and artifact extraction.

As chunks arrive the accumulator keeps the running text and recomputes two
derived views on every append:

- ``display_text``: the running text with a closing fence appended when it
  holds an odd number of triple-backtick markers, so a fenced block that is
  still streaming renders as a block.
- ``artifact``: the first structurally complete embedded document found by
  :func:`extract_artifact`. A later append that yields no artifact keeps the
  previous one; one that yields an artifact replaces it.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

FENCE = "```"

_ARTIFACT_LANGUAGES = ("html", "htm", "xhtml", "svg")

_FENCED_BLOCK = re.compile(r"```[ \t]*([A-Za-z0-9_+-]*)[^\n]*\n(.*?)\n?```", re.DOTALL)
_HTML_DOCUMENT = re.compile(r"(?:<!DOCTYPE\s+html[^>]*>\s*)?<html\b.*?</html\s*>", re.DOTALL | re.IGNORECASE)
_SVG_DOCUMENT = re.compile(r"<svg\b.*?</svg\s*>", re.DOTALL | re.IGNORECASE)
_TITLE = re.compile(r"<title[^>]*>(.*?)</title\s*>", re.DOTALL | re.IGNORECASE)


@dataclass(frozen=True)
class Artifact:
    language: str
    code: str
    title: Optional[str] = None


def build_display_text(text: str) -> str:
    """Append one closing fence when ``text`` has an unbalanced fence count."""
    if text.count(FENCE) % 2 == 1:
        return text + "\n" + FENCE
    return text


def _title_of(code: str) -> Optional[str]:
    match = _TITLE.search(code)
    if match:
        title = match.group(1).strip()
        return title or None
    return None


def extract_artifact(text: str) -> Optional[Artifact]:
    """Return the first complete embedded artifact in ``text``.

    Priority: a closed fenced block tagged html/htm/xhtml/svg, then a bare
    HTML document, then a bare ``<svg>`` element.
    """
    if not text:
        return None
    for match in _FENCED_BLOCK.finditer(text):
        language = match.group(1).lower()
        if language in _ARTIFACT_LANGUAGES:
            code = match.group(2).strip()
            if code:
                lang = "svg" if language == "svg" else "html"
                return Artifact(language=lang, code=code, title=_title_of(code))
    html = _HTML_DOCUMENT.search(text)
    if html:
        code = html.group(0).strip()
        return Artifact(language="html", code=code, title=_title_of(code))
    svg = _SVG_DOCUMENT.search(text)
    if svg:
        return Artifact(language="svg", code=svg.group(0).strip())
    return None


class StreamAccumulator:
    """Running text plus derived display text and artifact."""

    def __init__(self, initial: str = "") -> None:
        self.text = ""
        self.display_text = ""
        self.artifact: Optional[Artifact] = None
        if initial:
            self.append(initial)

    def append(self, delta: str) -> str:
        """Add ``delta`` and recompute the derived views; returns display text."""
        if delta:
            self.text += delta
        self.display_text = build_display_text(self.text)
        found = extract_artifact(self.text)
        if found is not None:
            self.artifact = found
        return self.display_text

    def reset(self) -> None:
        self.text = ""
        self.display_text = ""
        self.artifact = None


__all__ = ["Artifact", "StreamAccumulator", "build_display_text", "extract_artifact"]
