"""
Token bucket rate limiting for outbound elevation requests.
"""

import asyncio
import logging
import time

logger = logging.getLogger(__name__)


class RateLimiter:
    """Token bucket rate limiter shared by concurrent requests of one client."""

    def __init__(self, calls: int, period: float) -> None:
        """
        Initialize rate limiter.

        Args:
            calls: Maximum number of calls per period
            period: Time period in seconds
        """
        self.calls = calls
        self.period = period
        self.tokens = float(calls)
        self.last_update = time.monotonic()

    def acquire(self) -> bool:
        """
        Take a token if one is available.

        Returns:
            True if a token was taken, False if rate limited
        """
        now = time.monotonic()
        elapsed = now - self.last_update

        # Refill tokens based on elapsed time
        self.tokens = min(self.calls, self.tokens + elapsed * (self.calls / self.period))
        self.last_update = now

        if self.tokens >= 1:
            self.tokens -= 1
            return True

        return False

    def wait_time(self) -> float:
        """
        Seconds until the next token is available.

        Returns:
            Wait time in seconds
        """
        if self.tokens >= 1:
            return 0.0

        tokens_needed = 1 - self.tokens
        return tokens_needed * (self.period / self.calls)

    async def wait(self) -> None:
        """Sleep until a token can be taken, then take it."""
        while not self.acquire():
            delay = self.wait_time()
            logger.debug(f"Rate limited, waiting {delay:.2f}s")
            await asyncio.sleep(delay)
