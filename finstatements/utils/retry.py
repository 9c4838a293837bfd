"""Retry utilities with exponential backoff and jitter.

Remote calls run once unless a caller opts in with ``max_attempts > 1``.

Usage:
    @with_retry(max_attempts=3, retry_on=(httpx.HTTPStatusError,))
    def fetch_text(url):
        return client.post("/get_data_from_url", json={"input_data": url})
"""

import logging
import random
import time
from functools import wraps
from typing import Callable, Tuple, Type

logger = logging.getLogger(__name__)


def backoff_delay(
    attempt: int,
    initial_delay: float,
    max_delay: float,
    exponential_base: float = 2.0,
    jitter: bool = True,
) -> float:
    """Delay before retry number ``attempt`` (1-based).

    >>> backoff_delay(1, 1.0, 60.0, jitter=False)
    1.0
    >>> backoff_delay(3, 1.0, 60.0, jitter=False)
    4.0
    >>> backoff_delay(10, 1.0, 5.0, jitter=False)
    5.0
    """
    delay = min(initial_delay * (exponential_base ** (attempt - 1)), max_delay)
    if jitter:
        delay *= 0.5 + random.random()
    return delay


def with_retry(
    max_attempts: int = 1,
    initial_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
    retry_on: Tuple[Type[Exception], ...] = (Exception,),
    reraise_on: Tuple[Type[Exception], ...] = (),
    sleep: Callable[[float], None] = time.sleep,
):
    """Retry decorator with exponential backoff and jitter.

    Args:
        max_attempts: Maximum number of attempts including the first (1 = no retry)
        initial_delay: Starting delay in seconds
        max_delay: Cap on delay duration
        exponential_base: Multiplier for each retry
        jitter: Randomise each delay between 50% and 150%
        retry_on: Exception types that trigger a retry
        reraise_on: Exception types that abort immediately
        sleep: Called with each delay; tests pass a no-op

    Example:
        >>> @with_retry(
        ...     max_attempts=3,
        ...     retry_on=(httpx.TimeoutException,),
        ...     reraise_on=(ClientRequestError,),
        ... )
        ... def archive(name, data):
        ...     return client.post(f"/archives/{archive_id}", files={"file": (name, data)})
    """
    attempts_allowed = max(1, max_attempts)

    def decorator(func: Callable):
        func_name = getattr(func, "__name__", "unknown")

        @wraps(func)
        def wrapper(*args, **kwargs):
            attempt = 0
            while True:
                try:
                    return func(*args, **kwargs)
                except reraise_on:
                    raise
                except retry_on as exc:
                    attempt += 1
                    if attempt >= attempts_allowed:
                        if attempts_allowed > 1:
                            logger.error(
                                "Giving up on %s after %d attempts: %s",
                                func_name,
                                attempts_allowed,
                                exc,
                            )
                        raise

                    delay = backoff_delay(
                        attempt, initial_delay, max_delay, exponential_base, jitter
                    )
                    logger.warning(
                        "Retry %d/%d for %s after %.2fs: %s",
                        attempt,
                        attempts_allowed,
                        func_name,
                        delay,
                        exc,
                    )
                    sleep(delay)

        return wrapper

    return decorator
