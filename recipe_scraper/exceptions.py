"""
Exceptions raised by the recipe acquisition pipeline.
"""


class ScraperError(Exception):
    """Base class for pipeline errors."""


class SiteNotFoundError(ScraperError, ValueError):
    """The requested source site is not configured."""

    def __init__(self, site_name: str):
        self.site_name = site_name
        super().__init__(f'Site not found: "{site_name}". Run the source seeder first.')


class NoActiveSitesError(ScraperError):
    """No active source site matched the job filter."""

    def __init__(self):
        super().__init__("No active source sites found")


class DuplicateRecipeError(ScraperError):
    """A master recipe with the same source URL already exists."""

    def __init__(self, source_url: str):
        self.source_url = source_url
        super().__init__(f"Recipe already exists for {source_url}")


class JobNotFoundError(ScraperError, LookupError):
    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Scraping job not found: {job_id}")


class JobCancelledError(ScraperError):
    """The job was marked failed while it was running."""

    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job {job_id} was cancelled")
