"""
Cancellation and deadline handling for production runs.
"""
import asyncio
import time
from typing import Awaitable, Optional, TypeVar

from .exceptions import ProductionCancelled

T = TypeVar("T")


class CancellationToken:
    """
    Cooperative cancellation flag with an optional wall-clock deadline.

    One token is shared by every stage of a run (and by every segment of a
    batch). Stages call ``check()`` between units and wrap provider calls
    in ``guard()`` so a pending call is abandoned as soon as the token fires.
    """

    def __init__(self, timeout: Optional[float] = None):
        self._event = asyncio.Event()
        self._reason: Optional[str] = None
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self, reason: str = "Production cancelled") -> None:
        if self._reason is None:
            self._reason = reason
        self._event.set()

    @property
    def remaining(self) -> Optional[float]:
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self.cancel("Production deadline exceeded")
            return True
        return False

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def check(self) -> None:
        """Raise ProductionCancelled if the token has fired."""
        if self.cancelled:
            raise ProductionCancelled(self._reason or "Production cancelled")

    async def sleep(self, seconds: float) -> None:
        """Sleep, waking early (and raising) on cancellation."""
        await self.guard(asyncio.sleep(seconds))

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """
        Await ``awaitable`` unless the token fires first.

        The pending work is cancelled when the token fires or the deadline
        passes, and ProductionCancelled is raised.
        """
        self.check()

        work = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait(
                {work, waiter},
                timeout=self.remaining,
                return_when=asyncio.FIRST_COMPLETED,
            )
        except BaseException:
            work.cancel()
            raise
        finally:
            waiter.cancel()

        if work in done:
            return work.result()

        work.cancel()
        if not self._event.is_set():
            self.cancel("Production deadline exceeded")
        raise ProductionCancelled(self._reason or "Production cancelled")
