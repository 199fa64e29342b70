"""
URL discovery for recipe sites.
Walks a site's search result pages and collects candidate recipe URLs
without parsing the recipes themselves.
"""

import time
from datetime import datetime, timezone
from typing import Callable, List, Optional, TYPE_CHECKING
from urllib.parse import quote, urldefrag, urljoin, urlparse

from bs4 import BeautifulSoup

from ..config import RateLimitConfig
from ..models import DiscoveryResult
from .rate_limiter import RateLimiter
from .retry_handler import RetryHandler

if TYPE_CHECKING:
    from ..db_models import SourceSite
    from ..page_fetcher import PageFetcher

GENERIC_RESULT_SELECTORS = [
    'a[href*="/recipe/"]',
    'a[href*="/recipes/"]',
    '.recipe-card a',
    '.recipe-link',
    '[data-recipe-id] a',
    'article a[href*="recipe"]',
]

RECIPE_PATH_MARKER = '/recipe'
COLLECTION_PATH_MARKERS = ('/collection', '/category', '/tag/', '/search')


def build_search_url(site: "SourceSite", query: str, page: int) -> str:
    """Substitute the query term and page number into the site's search pattern."""
    url = site.base_url.rstrip('/') + site.search_url_pattern
    url = url.replace('{query}', quote(query, safe=''))
    url = url.replace('{page}', str(page))
    return url


def _hostname(url: str) -> str:
    return (urlparse(url).hostname or '').lower()


def is_recipe_url(url: str, site: "SourceSite") -> bool:
    """
    Check that a link looks like a single recipe on the site itself.

    Args:
        url: Link href, relative or absolute
        site: Site the link was found on

    Returns:
        True if the URL has a recipe path, is not a listing page and is on the same host
    """
    has_recipe_path = RECIPE_PATH_MARKER in url
    is_collection = any(marker in url for marker in COLLECTION_PATH_MARKERS)

    is_absolute = url.startswith('http') or url.startswith('//')
    is_same_domain = not is_absolute or _hostname(urljoin(site.base_url, url)) == _hostname(site.base_url)

    return has_recipe_path and not is_collection and is_same_domain


def extract_recipe_urls(html: str, site: "SourceSite") -> List[str]:
    """
    Extract absolute recipe URLs from a search results page.

    Returns:
        Unique URLs in page order
    """
    soup = BeautifulSoup(html, 'html.parser')
    selectors = [site.search_results_selector] if site.search_results_selector else GENERIC_RESULT_SELECTORS

    urls = []
    for selector in selectors:
        for link in soup.select(selector):
            href = (link.get('href') or '').strip()
            if href and is_recipe_url(href, site):
                full_url, _ = urldefrag(urljoin(site.base_url, href))
                urls.append(full_url)

    return list(dict.fromkeys(urls))


class ContentDiscovery:
    """Discovers recipe URLs across a site's paginated search results."""

    def __init__(
        self,
        fetcher: "PageFetcher",
        retry_handler: Optional[RetryHandler] = None,
        sleep_func: Callable[[float], None] = time.sleep
    ):
        """
        Initialize with a page fetcher.

        Args:
            fetcher: Object with fetch(url) -> html
            retry_handler: RetryHandler for page fetches, uses defaults if None
            sleep_func: Sleep function for page delays (replaceable in tests)
        """
        self.fetcher = fetcher
        self.retry_handler = retry_handler or RetryHandler()
        self._sleep = sleep_func

    def get_recipe_urls_for_page(self, site: "SourceSite", category: str, page: int) -> Optional[List[str]]:
        """
        Get recipe URLs from one search results page.

        Returns:
            List of URLs, or None if the page could not be fetched after retries
        """
        search_url = build_search_url(site, category, page)
        print(f"   Page {page}: {search_url}")

        success, result = self.retry_handler.execute_with_retry(self.fetcher.fetch, search_url)
        if not success:
            print(f"  ✗ Failed to fetch page {page} after {self.retry_handler.config.max_retries} attempts: {result}")
            return None

        return extract_recipe_urls(result, site)

    def discover(
        self,
        site: "SourceSite",
        category: str,
        max_pages: int = 3,
        delay_between_pages: float = 1.5
    ) -> DiscoveryResult:
        """
        Discover recipe URLs for one category of a site.

        Stops early at the first page that fails or adds no new URLs;
        URLs found before that point are still returned.

        Args:
            site: Source site configuration
            category: Search term to sweep
            max_pages: Upper bound on result pages
            delay_between_pages: Seconds to wait between page fetches

        Returns:
            DiscoveryResult with deduplicated URLs
        """
        rate_limiter = RateLimiter(
            RateLimitConfig(delay_between_pages=delay_between_pages),
            sleep_func=self._sleep
        )
        found: List[str] = []
        seen = set()

        print(f"Discovering recipes: {site.display_name} / \"{category}\"")

        for page in range(1, max_pages + 1):
            try:
                page_urls = self.get_recipe_urls_for_page(site, category, page)
            except Exception as e:
                print(f"  ✗ Error discovering page {page}: {e}")
                break
            if page_urls is None:
                break

            new_urls = [u for u in page_urls if u not in seen]
            if not new_urls:
                print(f"   No more results on page {page}, stopping")
                break

            seen.update(new_urls)
            found.extend(new_urls)
            print(f"   Found {len(new_urls)} recipe URLs on page {page} (total: {len(found)})")

            if page < max_pages:
                rate_limiter.wait_between_pages()

        print(f"✓ Discovered {len(found)} unique recipe URLs from {site.display_name}/{category}")

        return DiscoveryResult(
            urls=found,
            site=site.name,
            category=category,
            scraped_at=datetime.now(timezone.utc)
        )

    def discover_all_categories(
        self,
        site: "SourceSite",
        max_pages_per_category: int = 2,
        delay_between_pages: float = 1.5,
        delay_between_categories: float = 3.0
    ) -> List[DiscoveryResult]:
        """Discover URLs for every configured category of a site."""
        rate_limiter = RateLimiter(
            RateLimitConfig(delay_between_categories=delay_between_categories),
            sleep_func=self._sleep
        )
        categories = site.categories
        results = []

        for i, category in enumerate(categories):
            results.append(self.discover(
                site, category,
                max_pages=max_pages_per_category,
                delay_between_pages=delay_between_pages
            ))
            if i < len(categories) - 1:
                rate_limiter.wait_between_categories()

        return results
