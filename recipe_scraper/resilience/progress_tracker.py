"""
Progress tracking for scraping jobs.
Accumulates counters in memory and writes them to the job row at checkpoints.
"""

from typing import Optional, TYPE_CHECKING

from ..models import JobProgress, JobStatus

if TYPE_CHECKING:
    from ..database_storage import DatabaseStorage


class JobProgressTracker:
    """Holds a job's counters and flushes them to storage."""

    def __init__(
        self,
        storage: "DatabaseStorage",
        job_id: str,
        flush_interval: int = 5,
        max_errors: int = 100
    ):
        """
        Initialize tracker for one job.

        Args:
            storage: DatabaseStorage holding the job row
            job_id: Job being tracked
            flush_interval: Flush after this many processed URLs
            max_errors: Cap on retained error messages
        """
        self.storage = storage
        self.job_id = job_id
        self.flush_interval = max(1, flush_interval)
        self.progress = JobProgress(max_errors=max_errors)
        self._flush_count = 0

    def record_discovered(self, count: int) -> bool:
        """
        Count newly discovered URLs and checkpoint immediately.

        Returns:
            False if storage refused the checkpoint (job already finalized)
        """
        self.progress.record_discovered(count)
        return self.flush()

    def record_processed(self):
        self.progress.record_processed()

    def record_succeeded(self):
        self.progress.record_succeeded()

    def record_skipped(self):
        self.progress.record_skipped()

    def record_failed(self, url: str, error: str):
        self.progress.record_failed(url, error)

    def maybe_flush(self) -> bool:
        """Flush when processed count hits the interval."""
        processed = self.progress.urls_processed
        if processed and processed % self.flush_interval == 0:
            self.flush()
            return True
        return False

    def flush(self) -> bool:
        """
        Write current counters to the job row.

        Returns:
            False if storage refused the write (job already finalized)
        """
        self._flush_count += 1
        return self.storage.update_job_progress(self.job_id, self.progress.counters())

    def is_cancelled(self) -> bool:
        """True if the job was marked failed out-of-band."""
        return self.storage.get_job_status(self.job_id) == JobStatus.FAILED

    def error_log(self) -> Optional[str]:
        return '\n'.join(self.progress.errors) if self.progress.errors else None

    def finalize(self, status: str, error_log: Optional[str] = None) -> bool:
        """
        Write the terminal status with the final counters.

        Args:
            status: completed or failed
            error_log: Overrides the accumulated error messages when given

        Returns:
            False if the job had already been finalized
        """
        log = error_log if error_log is not None else self.error_log()
        return self.storage.finalize_job(self.job_id, status, self.progress.counters(), log)

    def get_stats(self) -> dict:
        stats = self.progress.counters()
        stats['errors'] = len(self.progress.errors)
        stats['flushes'] = self._flush_count
        return stats
