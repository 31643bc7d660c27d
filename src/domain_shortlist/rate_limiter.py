"""
Rate Limiter module for the domain shortlist system.

This module provides fixed-interval pacing for external lookups:
- Serial access (an asyncio.Lock guards every wait)
- A fixed minimum gap between the end of one call and the start of the next
- Injectable clock and sleep functions so pacing is testable without delays

There is deliberately no token bucket and no adaptive backoff.
"""

import asyncio
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable, Optional


Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


@dataclass
class RateLimitStatus:
    """Result of a rate limit check."""

    allowed: bool
    wait_seconds: float
    reason: Optional[str] = None


class RateLimiter:
    """
    Fixed-interval rate limiter.

    Ensures:
    - At least `interval_seconds` pass between `mark()` and the next
      successful `wait()`
    - The first call after construction or `reset()` never waits
    - Concurrent waiters are serialized
    """

    def __init__(
        self,
        interval_seconds: float,
        name: str = "default",
        clock: Optional[Clock] = None,
        sleep: Optional[Sleep] = None,
    ) -> None:
        """
        Initialize the rate limiter.

        Args:
            interval_seconds: Minimum gap between successive calls
            name: Label used in status reasons and logs
            clock: Monotonic clock (defaults to time.monotonic)
            sleep: Coroutine used to wait (defaults to asyncio.sleep)
        """
        if interval_seconds < 0:
            raise ValueError(f"interval_seconds must be >= 0, got {interval_seconds}")

        self._interval = float(interval_seconds)
        self._name = name
        self._clock = clock or time.monotonic
        self._sleep = sleep or asyncio.sleep
        self._last_mark: Optional[float] = None
        self._lock = asyncio.Lock()

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def name(self) -> str:
        return self._name

    def check(self) -> RateLimitStatus:
        """
        Calculate whether a call may start right now.

        Returns:
            RateLimitStatus with the remaining wait time
        """
        if self._last_mark is None or self._interval == 0:
            return RateLimitStatus(allowed=True, wait_seconds=0.0)

        elapsed = self._clock() - self._last_mark
        remaining = self._interval - elapsed
        if remaining <= 0:
            return RateLimitStatus(allowed=True, wait_seconds=0.0)

        return RateLimitStatus(
            allowed=False,
            wait_seconds=remaining,
            reason=f"Minimum interval for {self._name}: {self._interval}s",
        )

    async def wait(self) -> float:
        """
        Wait until the next call is allowed.

        Returns:
            The number of seconds spent waiting
        """
        async with self._lock:
            status = self.check()
            if status.allowed:
                return 0.0
            await self._sleep(status.wait_seconds)
            return status.wait_seconds

    def mark(self) -> None:
        """Record that a call has just finished."""
        self._last_mark = self._clock()

    def reset(self) -> None:
        """Forget the previous call so the next one starts immediately."""
        self._last_mark = None

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[float]:
        """
        Wait for the interval, hold the slot for the call, then mark it.

        Usage:
            async with limiter.acquire():
                await make_request()

        Yields:
            The number of seconds spent waiting
        """
        waited = await self.wait()
        try:
            yield waited
        finally:
            self.mark()
