"""
Retry handling with backoff for transient fetch failures.
"""

import time
from typing import Any, Callable, Optional, Tuple

import requests

from ..config import RetryConfig


class RetryHandler:
    """Retries a call on network/HTTP errors, waiting attempt x base_delay between tries."""

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        sleep_func: Callable[[float], None] = time.sleep
    ):
        """
        Initialize retry handler.

        Args:
            config: RetryConfig instance, uses defaults if None
            sleep_func: Sleep function (replaceable in tests)
        """
        self.config = config or RetryConfig()
        self._sleep = sleep_func
        self._total_attempts = 0
        self._total_exhausted = 0

    def execute_with_retry(
        self,
        func: Callable,
        *args,
        **kwargs
    ) -> Tuple[bool, Any]:
        """
        Execute function with retry logic.

        Only requests exceptions are retried; anything else propagates.

        Args:
            func: Function to execute
            *args: Positional arguments for func
            **kwargs: Keyword arguments for func

        Returns:
            Tuple of (success: bool, result or last error message)
        """
        last_error = None

        for attempt in range(1, self.config.max_retries + 1):
            self._total_attempts += 1
            try:
                return True, func(*args, **kwargs)
            except requests.RequestException as e:
                last_error = str(e)
                print(f"  Attempt {attempt}/{self.config.max_retries} failed: {e}")

            # Don't sleep after last attempt
            if attempt < self.config.max_retries:
                sleep_time = self.backoff_delay(attempt)
                print(f"  Retrying in {sleep_time:.1f}s...")
                self._sleep(sleep_time)

        self._total_exhausted += 1
        return False, last_error

    def backoff_delay(self, attempt: int) -> float:
        """Delay after the given (1-based) failed attempt."""
        return min(self.config.base_delay * attempt, self.config.max_delay)

    def get_stats(self) -> dict:
        return {
            'total_attempts': self._total_attempts,
            'total_exhausted': self._total_exhausted,
            'max_retries': self.config.max_retries,
            'base_delay': self.config.base_delay
        }
