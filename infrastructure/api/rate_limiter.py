"""Token-bucket throttle shared by every request to the analytics site."""
import asyncio
import time
from collections import deque
from typing import Callable, Deque, Optional, Tuple
import logging

logger = logging.getLogger(__name__)


class TokenBucketRateLimiter:
    """
    Cooperative token bucket:
      - Burst    : up to ``capacity`` requests back to back
      - Sustained: one new token every ``refill_period`` seconds

    Tokens are credited lazily from elapsed time on every acquisition. When
    the bucket is dry callers wait in a FIFO queue, and a drain task ticks
    once per refill period handing tokens out in order. The drain task only
    exists while somebody is waiting.

    Entering champion select fires matchup, build and rune lookups at the same
    time; they all go through one instance of this class.
    """

    def __init__(
        self,
        capacity: int = 3,
        refill_period: float = 0.5,
        clock: Callable[[], float] = time.monotonic,
    ):
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        if refill_period <= 0:
            raise ValueError(f"refill_period must be positive, got {refill_period}")
        self.capacity = capacity
        self.refill_period = refill_period
        self._clock = clock

        self._tokens = capacity
        self._last_refill = clock()
        self._waiters: Deque[asyncio.Future] = deque()
        self._drain_task: Optional[asyncio.Task] = None

    @property
    def tokens(self) -> int:
        self._refill()
        return self._tokens

    @property
    def queued(self) -> int:
        return len(self._waiters)

    def _refill(self) -> None:
        now = self._clock()
        periods = int((now - self._last_refill) // self.refill_period)
        if periods > 0:
            self._tokens = min(self.capacity, self._tokens + periods)
            self._last_refill += periods * self.refill_period

    async def acquire(self) -> None:
        self._refill()
        # Queued callers keep priority even if a token just became free.
        if self._tokens > 0 and not self._waiters:
            self._tokens -= 1
            return

        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        if self._drain_task is None or self._drain_task.done():
            self._drain_task = asyncio.create_task(self._drain())
        logger.debug(f"Throttle: queued (waiting: {len(self._waiters)})")
        await waiter

    def try_acquire(self) -> bool:
        """Take a token without waiting; False when none is free."""
        self._refill()
        if self._tokens > 0 and not self._waiters:
            self._tokens -= 1
            return True
        return False

    async def _drain(self) -> None:
        try:
            while self._waiters:
                await asyncio.sleep(self.refill_period)
                self._refill()
                while self._waiters and self._tokens > 0:
                    waiter = self._waiters.popleft()
                    if waiter.done():
                        # cancelled while queued; its token stays in the bucket
                        continue
                    self._tokens -= 1
                    waiter.set_result(None)
        finally:
            self._drain_task = None

    def get_status(self) -> Tuple[int, int, int]:
        """(tokens available, capacity, callers waiting)."""
        return self.tokens, self.capacity, len(self._waiters)

    def reset(self) -> None:
        """Refill the bucket; queued callers are served on the next tick."""
        self._tokens = self.capacity
        self._last_refill = self._clock()
