"""Shared pipeline objects for request handlers.

Storage and the job runner are created lazily on first use so the API can
start (and serve health checks) before the parsing service is configured.
"""
from typing import Optional

from recipe_admin.core.config import settings
from recipe_scraper.database_storage import DatabaseStorage
from recipe_scraper.job_runner import JobRunner
from recipe_scraper.storage_factory import create_job_runner, create_storage

_storage: Optional[DatabaseStorage] = None
_job_runner: Optional[JobRunner] = None


def get_storage() -> DatabaseStorage:
    """Dependency returning the shared DatabaseStorage."""
    global _storage
    if _storage is None:
        _storage = create_storage(
            connection_string=settings.database_url or None,
            database_path=settings.database_path,
        )
    return _storage


def get_job_runner() -> JobRunner:
    """Dependency returning the shared JobRunner."""
    global _job_runner
    if _job_runner is None:
        _job_runner = create_job_runner(
            storage=get_storage(),
            api_key=settings.openai_api_key or None,
            model=settings.recipe_parser_model or None,
        )
    return _job_runner


def close_storage():
    """Dispose the shared engine."""
    global _storage, _job_runner
    if _storage is not None:
        _storage.close()
    _storage = None
    _job_runner = None
