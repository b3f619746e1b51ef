"""Implementation of a rate limiter.

Controls the frequency of outgoing requests to stay under the API's
requests-per-second ceiling. Uses a token bucket: the bucket holds up to
``burst`` tokens and refills at ``rate`` tokens per second.
"""

import asyncio
import logging
import time
from typing import Callable

logger = logging.getLogger(__name__)

DEFAULT_RATE = 3.0  # Jikan allows 3 requests...
DEFAULT_BURST = 3  # ...per second, with short bursts


class RateLimiter:
    """Async token-bucket rate limiter.

    Waiters are served in arrival order: the lock is held while a waiter
    sleeps for its token, and ``asyncio.Lock`` wakes waiters FIFO.
    Cancelling a waiter (or hitting an ``asyncio.timeout`` deadline) abandons
    the wait without consuming a token.
    """

    def __init__(
        self,
        rate: float = DEFAULT_RATE,
        burst: int = DEFAULT_BURST,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initializes the rate limiter.

        Args:
            rate: Tokens added per second.
            burst: Bucket capacity; the bucket starts full.
            clock: Monotonic time source, in seconds.
        """
        if rate <= 0:
            raise ValueError("rate must be positive")
        if burst < 1:
            raise ValueError("burst must be at least 1")
        self.rate = float(rate)
        self.burst = burst
        self._clock = clock
        self._tokens = float(burst)
        self._updated_at = clock()
        self._lock = asyncio.Lock()
        logger.info(f"RateLimiter initialized: {rate} requests/second, burst {burst}")

    @classmethod
    def per_second(cls, rps: int) -> "RateLimiter":
        """Limiter allowing ``rps`` requests per second (default 3 when rps <= 0)."""
        if rps <= 0:
            rps = int(DEFAULT_RATE)
        return cls(rate=rps, burst=DEFAULT_BURST)

    def _refill(self) -> None:
        now = self._clock()
        elapsed = max(0.0, now - self._updated_at)
        self._tokens = min(float(self.burst), self._tokens + elapsed * self.rate)
        self._updated_at = now

    def _time_until_token(self) -> float:
        if self._tokens >= 1.0:
            return 0.0
        return (1.0 - self._tokens) / self.rate

    async def wait_for_permission(self) -> None:
        """Waits until a token is available, then consumes it."""
        async with self._lock:
            while True:
                self._refill()
                wait_time = self._time_until_token()
                if wait_time <= 0:
                    self._tokens -= 1.0
                    logger.debug("Rate limit permission granted.")
                    return
                logger.debug(f"Rate limit reached. Waiting for {wait_time:.3f} seconds.")
                await asyncio.sleep(wait_time)

    async def get_wait_time(self) -> float:
        """Estimates the time needed before the next request can be made.

        Does not take the lock, so the estimate ignores waiters already queued.
        """
        elapsed = max(0.0, self._clock() - self._updated_at)
        tokens = min(float(self.burst), self._tokens + elapsed * self.rate)
        if tokens >= 1.0 and not self._lock.locked():
            return 0.0
        return max(0.0, (1.0 - tokens) / self.rate)
