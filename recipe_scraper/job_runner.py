"""
Job orchestrator for the recipe acquisition pipeline.
Sweeps sites x categories, discovering URLs and importing each one.
"""

import threading
import time
from datetime import datetime
from typing import Callable, Dict, Iterator, List, Optional, TYPE_CHECKING

from .config import JobOptions, ScraperConfig
from .exceptions import JobCancelledError, NoActiveSitesError, ScraperError, SiteNotFoundError
from .models import JobStatus, ScrapingJobResult
from .resilience.progress_tracker import JobProgressTracker
from .resilience.rate_limiter import RateLimiter

if TYPE_CHECKING:
    from .database_storage import DatabaseStorage
    from .db_models import SourceSite
    from .recipe_importer import RecipeImporter
    from .resilience.content_discovery import ContentDiscovery

CANCELLED_MESSAGE = "Job cancelled by user"


class JobRunner:
    """Runs scraping jobs and exposes their status."""

    def __init__(
        self,
        storage: "DatabaseStorage",
        discovery: "ContentDiscovery",
        importer: "RecipeImporter",
        config: Optional[ScraperConfig] = None,
        sleep_func: Callable[[float], None] = time.sleep
    ):
        """
        Initialize runner with its collaborators.

        Args:
            storage: DatabaseStorage for sites, jobs and recipes
            discovery: ContentDiscovery for search result pages
            importer: RecipeImporter for single URLs
            config: ScraperConfig instance, uses defaults if None
            sleep_func: Sleep function for politeness delays (replaceable in tests)
        """
        self.storage = storage
        self.discovery = discovery
        self.importer = importer
        self.config = config or ScraperConfig()
        self._sleep = sleep_func
        self._stop_events: Dict[str, threading.Event] = {}

    def _resolve_site_id(self, site_name: Optional[str]) -> Optional[str]:
        if not site_name:
            return None
        site = self.storage.get_site_by_name(site_name)
        if not site:
            raise SiteNotFoundError(site_name)
        return site.id

    def create_job(self, options: Optional[JobOptions] = None) -> str:
        """
        Create a pending job row for the given filters.

        Raises:
            SiteNotFoundError: If options.site_name is not configured
        """
        options = options or JobOptions()
        site_id = self._resolve_site_id(options.site_name)
        return self.storage.create_job(source_site_id=site_id, category=options.category or None)

    def run_job(self, options: Optional[JobOptions] = None, job_id: Optional[str] = None) -> ScrapingJobResult:
        """
        Run a scraping job to completion.

        Args:
            options: Site/category filters and pacing
            job_id: Existing pending job to run, created from options if None

        Returns:
            ScrapingJobResult with final counters

        Raises:
            SiteNotFoundError: If options.site_name is not configured and no
                job_id was given (no job is created)
        """
        options = options or JobOptions()
        site_id = None
        if job_id is None:
            site_id = self._resolve_site_id(options.site_name)
            job_id = self.storage.create_job(source_site_id=site_id, category=options.category or None)

        stop_event = threading.Event()
        self._stop_events[job_id] = stop_event
        try:
            return self._run(job_id, site_id, options, stop_event)
        finally:
            self._stop_events.pop(job_id, None)

    def _run(
        self,
        job_id: str,
        site_id: Optional[str],
        options: JobOptions,
        stop_event: threading.Event
    ) -> ScrapingJobResult:
        started_at = datetime.now()
        tracker = JobProgressTracker(
            self.storage,
            job_id,
            flush_interval=self.config.progress_flush_interval,
            max_errors=self.config.max_error_log_entries
        )

        print(f"\nStarting scraping job: {job_id}")
        print(f"   Site filter: {options.site_name or 'all sites'}")
        print(f"   Category filter: {options.category or 'all categories'}")

        if not self.storage.mark_job_running(job_id):
            print(f"✗ Job {job_id} was already finalized, not running it")
            return self._create_result(job_id, JobStatus.FAILED, tracker, started_at, [CANCELLED_MESSAGE])

        rate_limiter = RateLimiter(options.rate_limit(), sleep_func=self._sleep)

        try:
            # a pending job may outlive the site it was created for
            if site_id is None:
                site_id = self._resolve_site_id(options.site_name)

            sites = self.storage.get_active_sites(site_id)
            if not sites:
                raise NoActiveSitesError()
            print(f"   Found {len(sites)} site(s) to scrape")

            for site in self.iter_sites(sites, stop_event):
                for category in self.iter_categories(site, options.category, stop_event):
                    self._process_category(site, category, options, tracker, rate_limiter, stop_event)
                    if tracker.is_cancelled():
                        raise JobCancelledError(job_id)
                    rate_limiter.wait_between_categories()
                if not stop_event.is_set():
                    self.storage.mark_site_scraped(site.id)

            if stop_event.is_set():
                raise ScraperError("Job stopped before completion")

            if not tracker.finalize(JobStatus.COMPLETED):
                raise JobCancelledError(job_id)
            self._print_summary(job_id, tracker)
            return self._create_result(job_id, JobStatus.COMPLETED, tracker, started_at, list(tracker.progress.errors))

        except JobCancelledError:
            print(f"\n✗ Scraping job {job_id} was cancelled")
            return self._create_result(job_id, JobStatus.FAILED, tracker, started_at, [CANCELLED_MESSAGE])

        except Exception as e:
            message = str(e) or e.__class__.__name__
            print(f"\n✗ Scraping job failed: {message}")
            tracker.finalize(JobStatus.FAILED, error_log=message)
            return self._create_result(job_id, JobStatus.FAILED, tracker, started_at, [message])

    def iter_sites(self, sites: List["SourceSite"], stop_event: threading.Event) -> Iterator["SourceSite"]:
        """Yield sites in order until the run is stopped."""
        for site in sites:
            if stop_event.is_set():
                return
            print(f"\nProcessing site: {site.display_name}")
            yield site

    def iter_categories(
        self,
        site: "SourceSite",
        category: Optional[str],
        stop_event: threading.Event
    ) -> Iterator[str]:
        """Yield the category filter, or every configured category of the site."""
        categories = [category] if category else site.categories
        for cat in categories:
            if stop_event.is_set():
                return
            print(f"\n   Category: {cat}")
            yield cat

    def _process_category(
        self,
        site: "SourceSite",
        category: str,
        options: JobOptions,
        tracker: JobProgressTracker,
        rate_limiter: RateLimiter,
        stop_event: threading.Event
    ):
        discovered = self.discovery.discover(
            site,
            category,
            max_pages=options.max_pages_per_category,
            delay_between_pages=options.delay_between_pages
        )
        if not tracker.record_discovered(len(discovered.urls)):
            raise JobCancelledError(tracker.job_id)
        print(f"   Found {len(discovered.urls)} URLs")

        for url in discovered.urls:
            if stop_event.is_set():
                return
            if tracker.is_cancelled():
                raise JobCancelledError(tracker.job_id)

            tracker.record_processed()

            if self.storage.recipe_exists(url):
                tracker.record_skipped()
                print(f"   Skipped (exists): {url}")
            else:
                result = self.importer.import_url(url, site)

                if result.success and not result.skipped:
                    tracker.record_succeeded()
                elif result.skipped:
                    tracker.record_skipped()
                    print(f"   Skipped: {url} - {result.reason}")
                else:
                    tracker.record_failed(url, result.error)
                    print(f"  ✗ Failed: {url}: {result.error}")

                rate_limiter.wait_between_urls()

            tracker.maybe_flush()

    def _print_summary(self, job_id: str, tracker: JobProgressTracker):
        progress = tracker.progress
        print("\n✓ Scraping job complete!")
        print(f"   Job ID: {job_id}")
        print(f"   Discovered: {progress.urls_discovered}")
        print(f"   Processed: {progress.urls_processed}")
        print(f"   Succeeded: {progress.urls_succeeded}")
        print(f"   Skipped: {progress.urls_skipped}")
        print(f"   Failed: {progress.urls_failed}")

    def _create_result(
        self,
        job_id: str,
        status: str,
        tracker: JobProgressTracker,
        started_at: datetime,
        errors: List[str]
    ) -> ScrapingJobResult:
        """Create ScrapingJobResult with calculated fields."""
        completed_at = datetime.now()
        counters = tracker.progress.counters()

        return ScrapingJobResult(
            job_id=job_id,
            status=status,
            errors=errors,
            started_at=started_at.isoformat(),
            completed_at=completed_at.isoformat(),
            duration_seconds=(completed_at - started_at).total_seconds(),
            **counters
        )

    def get_job_status(self, job_id: str) -> Optional[dict]:
        return self.storage.get_job(job_id)

    def list_jobs(self, status: Optional[str] = None, limit: int = 20, offset: int = 0) -> List[dict]:
        """List jobs newest first."""
        if status and status not in JobStatus.ALL:
            raise ValueError(f"Invalid status: {status}. Must be one of {list(JobStatus.ALL)}")
        return self.storage.list_jobs(status=status, limit=limit, offset=offset)

    def cancel_job(self, job_id: str) -> Optional[dict]:
        """
        Mark a job failed so a running sweep stops at its next URL.

        Returns:
            The job after the update

        Raises:
            JobNotFoundError: If the job does not exist
        """
        if self.storage.cancel_job(job_id):
            print(f"✓ Cancelled job {job_id}")
        else:
            print(f"Job {job_id} already finished, nothing to cancel")
        return self.storage.get_job(job_id)

    def stop(self):
        """Gracefully stop every running job after the URL in progress."""
        print("\nStopping scraping job gracefully...")
        for event in list(self._stop_events.values()):
            event.set()
