"""
cooperative cancellation shared by every fetch of a condition cycle.

one CancellationToken is created per request and threaded through all
agents and fetches. an aborted fetch raises FetchAborted, which every
layer re-raises so the whole cycle fails instead of returning a partial
aggregate.
"""

import asyncio
from typing import Awaitable, Optional, TypeVar

T = TypeVar("T")


class FetchAborted(Exception):
    """raised when a fetch is abandoned because the cycle was cancelled"""
    pass


class CancellationToken:
    """single-shot cancellation signal backed by an asyncio.Event"""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason: Optional[str] = None

    def cancel(self, reason: str = "cancelled") -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise FetchAborted(self.reason or "cancelled")

    async def wait(self) -> None:
        await self._event.wait()


async def run_cancellable(awaitable: Awaitable[T], token: Optional[CancellationToken]) -> T:
    """
    await an awaitable, abandoning it as soon as the token fires.

    args:
        awaitable: coroutine or future to run
        token: cancellation token, None runs the awaitable unguarded

    raises:
        FetchAborted: when the token is (or becomes) cancelled
    """
    if token is None:
        return await awaitable

    if token.cancelled:
        # close the coroutine so it is not reported as never awaited
        close = getattr(awaitable, "close", None)
        if close is not None:
            close()
        token.raise_if_cancelled()

    work = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(token.wait())
    try:
        done, _ = await asyncio.wait({work, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        work.cancel()
        waiter.cancel()
        raise

    if work in done:
        waiter.cancel()
        return work.result()

    work.cancel()
    # drain the abandoned fetch, its outcome no longer matters
    await asyncio.gather(work, return_exceptions=True)
    raise FetchAborted(token.reason or "cancelled")
