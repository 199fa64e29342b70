"""
Configuration dataclasses for the recipe acquisition pipeline.
"""

from dataclasses import dataclass, field
from typing import Optional


DEFAULT_USER_AGENT = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)


@dataclass
class RateLimitConfig:
    """Politeness delays (seconds) toward third-party recipe sites."""
    delay_between_pages: float = 1.5
    delay_between_urls: float = 2.5
    delay_between_categories: float = 3.0
    jitter_percent: float = 0.0


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""
    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0


@dataclass
class HttpConfig:
    """Settings for outgoing page fetches."""
    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    accept_language: str = 'en-GB,en;q=0.9'


@dataclass
class ScraperConfig:
    """Main configuration for the pipeline."""
    retry: RetryConfig = field(default_factory=RetryConfig)
    http: HttpConfig = field(default_factory=HttpConfig)

    # Job bookkeeping
    progress_flush_interval: int = 5
    max_error_log_entries: int = 100

    # Import policy
    quality_threshold: int = 50
    default_servings: int = 4


@dataclass
class JobOptions:
    """Filters and pacing for a single scraping job."""
    site_name: Optional[str] = None
    category: Optional[str] = None
    max_pages_per_category: int = 2
    delay_between_urls: float = 2.5
    delay_between_categories: float = 3.0
    delay_between_pages: float = 1.5

    def rate_limit(self) -> RateLimitConfig:
        """Build the rate limit settings for this job."""
        return RateLimitConfig(
            delay_between_pages=self.delay_between_pages,
            delay_between_urls=self.delay_between_urls,
            delay_between_categories=self.delay_between_categories
        )
