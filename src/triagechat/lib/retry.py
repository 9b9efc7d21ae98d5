"""Retry utilities for backend calls using tenacity.

Retries live in the backend clients, never in the session loop: once a
backend call gives up, the session ends.

Examples:
    Retry an HTTP-backed call with exponential backoff::

        >>> @with_retry(max_attempts=3)
        ... def generate(contents: list[str]) -> str:
        ...     response = http_client.post(url, json={"contents": contents})
        ...     response.raise_for_status()
        ...     return response.json()["text"]

    Add extra retryable exceptions::

        >>> @with_retry(max_attempts=5, extra_exceptions=(ServerError,))
        ... def generate(contents: list[str]) -> str:
        ...     ...
"""

import logging
from collections.abc import Callable

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

RETRYABLE_HTTP_ERRORS: tuple[type[Exception], ...] = (
    httpx.HTTPStatusError,
    httpx.TimeoutException,
    httpx.ConnectError,
)


def with_retry[T](
    max_attempts: int = 3,
    min_wait: float = 2,
    max_wait: float = 10,
    extra_exceptions: tuple[type[Exception], ...] = (),
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator for retrying functions with exponential backoff.

    Retries on HTTP errors (status errors, timeouts, connection errors)
    plus any additional exception types specified via extra_exceptions.
    The last exception is re-raised once attempts are exhausted.

    Args:
        max_attempts: Maximum number of attempts (1 disables retrying).
        min_wait: Minimum wait time between retries in seconds.
        max_wait: Maximum wait time between retries in seconds.
        extra_exceptions: Additional exception types to retry on.

    Returns:
        Decorator that wraps the function with retry logic.
    """
    retryable = (*RETRYABLE_HTTP_ERRORS, *extra_exceptions)
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=1, min=min_wait, max=max_wait),
        retry=retry_if_exception_type(retryable),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
