"""
Resilience components for the recipe acquisition pipeline.
"""

from .progress_tracker import JobProgressTracker
from .rate_limiter import RateLimiter
from .retry_handler import RetryHandler
from .content_discovery import ContentDiscovery

__all__ = [
    'JobProgressTracker',
    'RateLimiter',
    'RetryHandler',
    'ContentDiscovery'
]
