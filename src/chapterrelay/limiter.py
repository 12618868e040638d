"""A FIFO counting semaphore bounding in-flight translation calls."""

import asyncio
import logging
from collections import deque
from collections.abc import Awaitable, Callable
from types import TracebackType
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ConcurrencyLimiter:
    """
    Bound the number of simultaneous holders to `max_concurrency`.

    Waiters are served strictly first-in-first-out and the queue is unbounded.
    A released slot is handed directly to the oldest waiter, so a newcomer can
    never overtake a task that is already queued. All bookkeeping happens
    synchronously inside `acquire` and `release`, so it is safe under the
    single-threaded asyncio scheduler without extra locking.
    """

    def __init__(self, max_concurrency: int) -> None:
        """
        Initialize the limiter.

        Args:
            max_concurrency: The maximum number of concurrent holders.

        Raises:
            ValueError: If `max_concurrency` is less than 1.

        """
        if max_concurrency < 1:
            msg = f"max_concurrency must be at least 1, got {max_concurrency}"
            raise ValueError(msg)
        self.max_concurrency = max_concurrency
        self._in_use = 0
        self._waiters: deque[asyncio.Future[None]] = deque()

    @property
    def in_use(self) -> int:
        """Return the number of slots currently held."""
        return self._in_use

    @property
    def waiting(self) -> int:
        """Return the number of tasks queued for a slot."""
        return len(self._waiters)

    async def acquire(self) -> None:
        """Wait until a slot is free, then take it."""
        if self._in_use < self.max_concurrency and not self._waiters:
            self._in_use += 1
            return

        waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        logger.debug("Limiter full (%d/%d); %d task(s) waiting.", self._in_use, self.max_concurrency, len(self._waiters))
        try:
            await waiter
        except asyncio.CancelledError:
            if waiter.done() and not waiter.cancelled():
                # The slot was handed over just before cancellation; pass it on.
                self.release()
            else:
                self._waiters.remove(waiter)
            raise

    def release(self) -> None:
        """
        Give a slot back, handing it to the oldest waiter if there is one.

        Raises:
            RuntimeError: If called more times than `acquire`.

        """
        if self._in_use <= 0:
            msg = "ConcurrencyLimiter released more times than it was acquired."
            raise RuntimeError(msg)

        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                # Ownership of the slot moves to the waiter; the count stays the same.
                waiter.set_result(None)
                return
        self._in_use -= 1

    async def run(self, task: Callable[[], Awaitable[T]]) -> T:
        """Run `task` while holding a slot, releasing it on every exit path."""
        await self.acquire()
        try:
            return await task()
        finally:
            self.release()

    async def __aenter__(self) -> "ConcurrencyLimiter":
        """Acquire a slot for the duration of an `async with` block."""
        await self.acquire()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Release the slot acquired by `__aenter__`."""
        self.release()
