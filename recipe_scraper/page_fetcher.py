"""
HTTP page fetching for discovery and import.
"""

from typing import Optional

import requests

from .config import HttpConfig


class PageFetcher:
    """Fetches raw HTML with browser-like headers."""

    def __init__(self, config: Optional[HttpConfig] = None, session: requests.Session = None):
        """
        Initialize fetcher.

        Args:
            config: HttpConfig instance, uses defaults if None
            session: Optional pre-built requests session
        """
        self.config = config or HttpConfig()
        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': self.config.user_agent,
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8',
            'Accept-Language': self.config.accept_language,
            'Cache-Control': 'no-cache',
        })

    def fetch(self, url: str) -> str:
        """
        GET a page and return its body.

        Raises:
            requests.HTTPError: On a non-2xx response
            requests.RequestException: On network failure or timeout
        """
        response = self.session.get(url, timeout=self.config.timeout)
        response.raise_for_status()
        return response.text

    def close(self):
        self.session.close()
