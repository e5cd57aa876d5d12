"""Retry logic with exponential backoff.

This module provides:
- RetryPolicy: Attempt ceiling and backoff schedule, applied to any callable
- retry_with_backoff: Functional shortcut for RetryPolicy.call
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from uploadmissing.core.errors import ExhaustedRetriesError

logger = logging.getLogger(__name__)

# Default retry configuration
DEFAULT_MAX_ATTEMPTS = 10
DEFAULT_INITIAL_BACKOFF = 1.0  # seconds
DEFAULT_MAX_BACKOFF = 60.0  # seconds
DEFAULT_BACKOFF_MULTIPLIER = 2.0


@dataclass(frozen=True)
class RetryPolicy:
    """How often and how patiently to retry a fallible operation.

    Attributes:
        max_attempts: Total attempts, the first one included.
        initial_backoff: Delay before the first retry, in seconds.
        max_backoff: Upper bound for any single delay.
        backoff_multiplier: Factor applied to the delay after each retry.
        retryable_exceptions: Exception types worth another attempt.
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    initial_backoff: float = DEFAULT_INITIAL_BACKOFF
    max_backoff: float = DEFAULT_MAX_BACKOFF
    backoff_multiplier: float = DEFAULT_BACKOFF_MULTIPLIER
    retryable_exceptions: tuple[type[Exception], ...] = (Exception,)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def delay_for(self, retry: int) -> float:
        """Return the delay before the given retry (1-based)."""
        delay = self.initial_backoff * self.backoff_multiplier ** (retry - 1)
        return min(delay, self.max_backoff)

    def call(
        self,
        func: Callable[[], Any],
        description: str = "operation",
        on_retry: Callable[[int, Exception], None] | None = None,
    ) -> Any:
        """Execute a function, retrying failures with exponential backoff.

        Args:
            func: Function to execute. Called afresh on every attempt.
            description: Name of the operation for log and error messages.
            on_retry: Optional callback (retry_number, error) invoked before
                each backoff sleep.

        Returns:
            Result of the function.

        Raises:
            ExhaustedRetriesError: If every attempt failed.
            Exception: Any non-retryable exception, unchanged.
        """
        for attempt in range(1, self.max_attempts + 1):
            try:
                return func()
            except self.retryable_exceptions as e:
                if attempt == self.max_attempts:
                    logger.error(f"{description}: all {self.max_attempts} attempts failed: {e}")
                    raise ExhaustedRetriesError(description, attempt, e) from e

                delay = self.delay_for(attempt)
                logger.warning(
                    f"{description}: attempt {attempt}/{self.max_attempts} failed: {e}. "
                    f"Retrying in {delay:.1f}s..."
                )
                if on_retry:
                    on_retry(attempt, e)
                time.sleep(delay)

        # Should not reach here, but satisfy type checker
        raise RuntimeError("Unexpected retry loop exit")


def retry_with_backoff(
    func: Callable[[], Any],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    initial_backoff: float = DEFAULT_INITIAL_BACKOFF,
    max_backoff: float = DEFAULT_MAX_BACKOFF,
    backoff_multiplier: float = DEFAULT_BACKOFF_MULTIPLIER,
    retryable_exceptions: tuple[type[Exception], ...] = (Exception,),
) -> Any:
    """Execute a function with exponential backoff retry.

    Returns:
        Result of the function.

    Raises:
        ExhaustedRetriesError: If all attempts fail.
    """
    policy = RetryPolicy(
        max_attempts=max_attempts,
        initial_backoff=initial_backoff,
        max_backoff=max_backoff,
        backoff_multiplier=backoff_multiplier,
        retryable_exceptions=retryable_exceptions,
    )
    return policy.call(func)
