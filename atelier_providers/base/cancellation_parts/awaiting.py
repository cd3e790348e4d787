"""Racing an awaitable against a :class:`CancellationToken`.

The awaitable runs as its own inner task; the token trips a private future.
Only the inner task is ever cancelled, so the caller's task never sees an
``asyncio.CancelledError`` it did not ask for. When the work finishes in the
same loop tick as the cancel, its result wins; the next token check raises.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Optional, TypeVar

from .cancellation_token import CancellationToken
from .cancelled_error import CancelledError

T = TypeVar("T")


async def _settle(work: "asyncio.Future[T]") -> None:
    """Cancel ``work`` and wait for it to unwind, retrieving its outcome."""
    work.cancel()
    await asyncio.wait({work})
    if not work.cancelled():
        work.exception()


async def await_cancellable(
    awaitable: Awaitable[T],
    token: Optional[CancellationToken],
    *,
    reason: str = "request cancelled",
) -> T:
    """Await ``awaitable``; cancelling ``token`` abandons it with ``CancelledError``."""
    if token is None:
        return await awaitable
    if token.cancelled:
        if asyncio.iscoroutine(awaitable):
            awaitable.close()
        token.raise_if_cancelled()

    loop = asyncio.get_running_loop()
    work = asyncio.ensure_future(awaitable)
    tripped: asyncio.Future[None] = loop.create_future()

    def _trip() -> None:
        if not tripped.done():
            tripped.set_result(None)

    unregister = token.add_callback(lambda: loop.call_soon_threadsafe(_trip))
    try:
        await asyncio.wait({work, tripped}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        work.cancel()
        raise
    finally:
        unregister()
        tripped.cancel()

    if work.done():
        return work.result()
    await _settle(work)
    raise CancelledError(token.reason or reason)


__all__ = ["await_cancellable"]
