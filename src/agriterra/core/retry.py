"""
Retry mechanism with exponential backoff for transient failures.

Used by the HTTP elevation providers for transport errors and by the
elevation enricher to space out re-requests of failed points.
"""

import asyncio
import functools
import logging
from typing import Any, Callable, Optional, Tuple, Type

import httpx

logger = logging.getLogger(__name__)


# Transient exceptions that should trigger retries by default
DEFAULT_TRANSIENT_EXCEPTIONS: Tuple[Type[Exception], ...] = (
    ConnectionError,
    TimeoutError,
    httpx.TransportError,
)

# 4xx statuses worth another attempt; the rest are deterministic
RETRYABLE_STATUS_CODES = frozenset({429})


def exponential_backoff(
    attempt: int,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
) -> float:
    """
    Calculate exponential backoff delay.

    Args:
        attempt: Current attempt number (0-indexed)
        base_delay: Initial delay in seconds
        max_delay: Maximum delay in seconds
        exponential_base: Base for exponential calculation

    Returns:
        Delay in seconds for this attempt
    """
    delay = base_delay * (exponential_base**attempt)
    return min(delay, max_delay)


def should_retry(
    exception: Exception,
    retryable_exceptions: Tuple[Type[Exception], ...],
) -> bool:
    """
    Determine if an exception should trigger a retry.

    HTTP status errors only qualify for throttling (429) and 5xx statuses.

    Args:
        exception: Exception that was raised
        retryable_exceptions: Tuple of exception types to retry

    Returns:
        True if the exception should trigger a retry
    """
    if not isinstance(exception, retryable_exceptions):
        return False
    if isinstance(exception, httpx.HTTPStatusError):
        return is_retryable_status(exception.response.status_code)
    return True


def is_retryable_status(status_code: int) -> bool:
    """True for throttling and server errors."""
    return status_code in RETRYABLE_STATUS_CODES or status_code >= 500


def async_retry(
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    retryable_exceptions: Optional[Tuple[Type[Exception], ...]] = None,
    on_retry: Optional[Callable[[Exception, int], None]] = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator for retrying async functions with exponential backoff.

    Args:
        max_attempts: Maximum number of attempts (including initial)
        base_delay: Initial delay in seconds
        max_delay: Maximum delay in seconds
        exponential_base: Base for exponential backoff
        retryable_exceptions: Tuple of exception types to retry
        on_retry: Optional callback function called on each retry

    Returns:
        Decorated async function with retry logic

    Example:
        @async_retry(max_attempts=3, base_delay=0.5)
        async def get_json(client, url):
            response = await client.get(url)
            response.raise_for_status()
            return response.json()
    """
    if retryable_exceptions is None:
        retryable_exceptions = DEFAULT_TRANSIENT_EXCEPTIONS

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            for attempt in range(max_attempts):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    if not should_retry(e, retryable_exceptions):
                        logger.debug(
                            f"Exception {type(e).__name__} is not retryable, "
                            f"raising immediately"
                        )
                        raise

                    if attempt >= max_attempts - 1:
                        logger.warning(
                            f"Max retry attempts ({max_attempts}) reached for "
                            f"{func.__name__}, raising exception"
                        )
                        raise

                    delay = exponential_backoff(
                        attempt, base_delay, max_delay, exponential_base
                    )

                    logger.info(
                        f"Retry attempt {attempt + 1}/{max_attempts} for "
                        f"{func.__name__} after {delay:.2f}s "
                        f"(error: {type(e).__name__}: {str(e)})"
                    )

                    if on_retry:
                        on_retry(e, attempt + 1)

                    await asyncio.sleep(delay)

            raise RuntimeError("Retry logic error: max_attempts must be at least 1")

        return wrapper

    return decorator
