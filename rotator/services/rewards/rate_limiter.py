"""
Rate limiter for the rewards API.

One process-wide gate shared by every wallet: consecutive permitted calls
are at least `min_interval` seconds apart, whichever wallet makes them.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable

from loguru import logger


class RateLimiter:
    """
    Minimum-interval gate.

    The wait and the timestamp update happen inside one lock, so concurrent
    callers are granted strictly one after another.

    Usage:
        async with limiter:
            await session.post(...)
    """

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initialize rate limiter.

        Args:
            min_interval: Minimum seconds between permitted calls
            clock: Monotonic clock (injectable for tests)
            sleep: Async sleep (injectable for tests)
        """
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._last_call: float | None = None

    @property
    def last_call(self) -> float | None:
        """Time of the last permitted call."""
        return self._last_call

    async def acquire(self) -> float:
        """
        Wait until the interval has elapsed, then stamp the call.

        Returns:
            The stamped call time
        """
        async with self._lock:
            if self._last_call is not None:
                wait_time = self._last_call + self.min_interval - self._clock()
                if wait_time > 0:
                    logger.info(
                        f"🛡️ Rate limiting: waiting {wait_time:.1f}s before next API call..."
                    )
                # Sleeps may wake early by the clock resolution
                while wait_time > 0:
                    await self._sleep(wait_time)
                    wait_time = self._last_call + self.min_interval - self._clock()

            now = self._clock()
            if self._last_call is not None and now < self._last_call:
                now = self._last_call
            self._last_call = now
            return now

    async def __aenter__(self) -> "RateLimiter":
        await self.acquire()
        return self

    async def __aexit__(self, *exc_info) -> None:
        return None
