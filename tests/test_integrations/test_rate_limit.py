"""
Tests for the token bucket rate limiter.
"""

import pytest

from agriterra.integrations.rate_limit import RateLimiter


class TestRateLimiter:
    """Tests for RateLimiter."""

    def test_initialization(self) -> None:
        """Test the bucket starts full."""
        limiter = RateLimiter(calls=10, period=1.0)
        assert limiter.calls == 10
        assert limiter.period == 1.0
        assert limiter.tokens == 10.0

    def test_acquire_until_empty(self) -> None:
        """Test tokens run out after the configured number of calls."""
        limiter = RateLimiter(calls=3, period=60.0)

        assert [limiter.acquire() for _ in range(3)] == [True, True, True]
        assert limiter.acquire() is False
        assert limiter.wait_time() > 0

    def test_wait_time_when_available(self) -> None:
        """Test no wait is needed while tokens remain."""
        assert RateLimiter(calls=5, period=1.0).wait_time() == 0.0

    @pytest.mark.asyncio
    async def test_wait_refills(self) -> None:
        """Test wait() sleeps until a token is available."""
        limiter = RateLimiter(calls=1, period=0.05)
        assert limiter.acquire() is True

        await limiter.wait()

        assert limiter.tokens < 1
