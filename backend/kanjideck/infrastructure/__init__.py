"""Infrastructure layer - cross-cutting helpers for external calls."""

from .retry import (
    DEFAULT_INITIAL_WAIT,
    DEFAULT_JITTER,
    DEFAULT_MAX_ATTEMPTS,
    RetryableError,
    retry_operation,
)

__all__ = [
    "DEFAULT_INITIAL_WAIT",
    "DEFAULT_JITTER",
    "DEFAULT_MAX_ATTEMPTS",
    "RetryableError",
    "retry_operation",
]
