"""Cooperative cancellation primitives (public API facade).

``CancellationToken`` signals an abort to in-flight requests and streams;
``CancelledError`` is raised by operations that observe the request;
``await_cancellable`` races one awaitable against a token.
"""

from .cancellation_parts.awaiting import await_cancellable
from .cancellation_parts.cancelled_error import CancelledError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError", "await_cancellable"]
