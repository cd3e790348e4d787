"""Cancellation error type.

Defines the public ``CancelledError`` used to signal cooperative cancellation
in provider operations.
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when an operation observes a cancellation request.

    Distinct from :class:`asyncio.CancelledError` so callers can tell a
    user-initiated abort apart from task teardown.
    """


__all__ = ["CancelledError"]
