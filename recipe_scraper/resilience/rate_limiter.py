"""
Politeness delays between requests to third-party recipe sites.
"""

import random
import time
from typing import Callable, Optional

from ..config import RateLimitConfig


class RateLimiter:
    """Sleeps between pages, URLs and categories with optional jitter."""

    def __init__(
        self,
        config: Optional[RateLimitConfig] = None,
        sleep_func: Callable[[float], None] = time.sleep
    ):
        """
        Initialize rate limiter with configuration.

        Args:
            config: RateLimitConfig instance, uses defaults if None
            sleep_func: Sleep function (replaceable in tests)
        """
        self.config = config or RateLimitConfig()
        self._sleep = sleep_func
        self._total_waited = 0.0
        self._wait_count = 0

    def wait_between_pages(self):
        self._wait(self.config.delay_between_pages)

    def wait_between_urls(self):
        self._wait(self.config.delay_between_urls)

    def wait_between_categories(self):
        self._wait(self.config.delay_between_categories)

    def _wait(self, delay: float):
        """Sleep for delay seconds plus jitter."""
        if delay <= 0:
            return

        jitter_range = delay * self.config.jitter_percent
        jitter = random.uniform(-jitter_range, jitter_range) if jitter_range else 0.0
        actual_delay = max(0.0, delay + jitter)

        self._sleep(actual_delay)
        self._total_waited += actual_delay
        self._wait_count += 1

    def get_stats(self) -> dict:
        """
        Get rate limiter statistics.

        Returns:
            Dict with current state info
        """
        return {
            'total_waited': self._total_waited,
            'wait_count': self._wait_count,
            'delay_between_pages': self.config.delay_between_pages,
            'delay_between_urls': self.config.delay_between_urls,
            'delay_between_categories': self.config.delay_between_categories
        }
