"""Retry utilities using tenacity for rate-limited remote calls."""

import logging
from collections.abc import Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Default retry configuration
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_INITIAL_WAIT = 2.0  # seconds
DEFAULT_MAX_WAIT = 30.0  # seconds
DEFAULT_JITTER = 1.0  # seconds


class RetryableError(Exception):
    """Base class for errors that should trigger automatic retries.

    Only server back-pressure belongs here. Failures the user must see
    (network loss, bad credentials) are not retryable on purpose.
    """

    pass


async def retry_operation(
    operation: Callable[..., T],
    *args,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    initial_wait: float = DEFAULT_INITIAL_WAIT,
    max_wait: float = DEFAULT_MAX_WAIT,
    jitter: float = DEFAULT_JITTER,
    retryable_exceptions: tuple = (RetryableError,),
    on_retry: Callable[[int, Exception], None] | None = None,
    **kwargs,
) -> T:
    """Execute an async operation with retry logic.

    Wait before attempt n+1: min(initial * 2^(n-1), max) + random(0, jitter)

    Args:
        operation: Async function to execute
        *args: Positional arguments for operation
        max_attempts: Maximum number of attempts
        initial_wait: Initial wait time in seconds
        max_wait: Maximum wait time in seconds
        jitter: Maximum random extra wait in seconds
        retryable_exceptions: Exception types to retry on
        on_retry: Optional callback called on each retry with (attempt, exception)
        **kwargs: Keyword arguments for operation

    Returns:
        Result of the operation

    Raises:
        Exception: The last exception once attempts are exhausted, or the
            first non-retryable one
    """
    last_exception: Exception | None = None

    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=initial_wait, max=max_wait) + wait_random(0, jitter),
        retry=retry_if_exception_type(retryable_exceptions),
        reraise=True,
    ):
        with attempt:
            attempt_num = attempt.retry_state.attempt_number
            if attempt_num > 1 and last_exception:
                logger.warning(
                    f"Retry attempt {attempt_num}/{max_attempts} for "
                    f"{getattr(operation, '__name__', operation)}: {last_exception}"
                )
                if on_retry:
                    on_retry(attempt_num, last_exception)
            try:
                return await operation(*args, **kwargs)
            except Exception as e:
                last_exception = e
                raise

    # Not reached with reraise=True
    raise RetryError(last_exception) if last_exception else RuntimeError("No attempts made")
