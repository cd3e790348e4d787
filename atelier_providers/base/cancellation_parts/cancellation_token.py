"""``CancellationToken``: one-shot abort signal shared by a call and its caller.

The caller keeps the token and calls :meth:`CancellationToken.cancel`; the
transport side either polls :meth:`raise_if_cancelled` between reads or
registers a listener with :meth:`add_callback` to interrupt a pending await.
Child tokens are just listeners of their parent.
"""

from __future__ import annotations

import itertools
import threading
from typing import Callable, Dict, Optional

from .cancelled_error import CancelledError

Listener = Callable[[], None]


class CancellationToken:
    """Thread-safe, idempotent cancel flag with listeners.

    The first ``cancel`` wins: its reason is kept and every listener runs
    exactly once, outside the lock, in registration order. Listeners added
    after cancellation run immediately.
    """

    def __init__(self) -> None:
        self._mutex = threading.Lock()
        self._is_set = False
        self._why: Optional[str] = None
        self._listeners: Dict[int, Listener] = {}
        self._ids = itertools.count()

    @property
    def cancelled(self) -> bool:
        return self._is_set

    @property
    def reason(self) -> Optional[str]:
        return self._why

    def cancel(self, reason: Optional[str] = None) -> None:
        with self._mutex:
            if self._is_set:
                return
            self._is_set = True
            self._why = reason
            pending = list(self._listeners.values())
            self._listeners.clear()
        for listener in pending:
            listener()

    def add_callback(self, callback: Listener) -> Callable[[], None]:
        """Run ``callback`` on cancel. Returns a function that unregisters it."""
        with self._mutex:
            key = None if self._is_set else next(self._ids)
            if key is not None:
                self._listeners[key] = callback
        if key is None:
            callback()
            return lambda: None

        def unregister() -> None:
            with self._mutex:
                self._listeners.pop(key, None)

        return unregister

    def child(self) -> "CancellationToken":
        """New token cancelled together with this one (not the other way round)."""
        token = CancellationToken()
        self.add_callback(lambda: token.cancel(self._why))
        return token

    def raise_if_cancelled(self) -> None:
        if self._is_set:
            raise CancelledError(self._why or "operation cancelled")

    def __repr__(self) -> str:  # pragma: no cover
        return f"<CancellationToken cancelled={self._is_set} reason={self._why!r}>"


__all__ = ["CancellationToken"]
