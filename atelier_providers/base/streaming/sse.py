"""Server-sent-event framing helpers.

The transport delivers arbitrary byte slices; ``SSELineBuffer`` re-joins them
into complete lines (split on newline, hold back the trailing fragment) and
``sse_payload`` turns one line into the payload handed to an adapter's
``parse_stream_chunk``:

- ``data: <payload>`` yields the stripped payload.
- ``: comment`` lines are passed through verbatim so adapters can classify
  vendor status comments themselves.
- Blank separators and other field lines (``event:``, ``id:``, ``retry:``)
  yield ``None``.
"""
from __future__ import annotations

from typing import List, Optional


class SSELineBuffer:
    """Incremental line splitter for decoded stream text."""

    def __init__(self) -> None:
        self._pending = ""

    def feed(self, text: str) -> List[str]:
        """Add ``text`` and return every line completed by it."""
        if not text:
            return []
        self._pending += text
        lines = self._pending.split("\n")
        self._pending = lines.pop()
        return [line.rstrip("\r") for line in lines]

    def flush(self) -> List[str]:
        """Return the held-back fragment (if any) as a final line."""
        rest, self._pending = self._pending, ""
        rest = rest.rstrip("\r")
        return [rest] if rest.strip() else []

    @property
    def pending(self) -> str:
        return self._pending


def sse_payload(line: str) -> Optional[str]:
    """Extract the adapter-facing payload from one SSE line."""
    if not line.strip():
        return None
    if line.startswith("data:"):
        payload = line[5:].strip()
        return payload or None
    if line.startswith(":"):
        return line.rstrip()
    return None


__all__ = ["SSELineBuffer", "sse_payload"]
