"""Tests for the SQLAlchemy storage layer and progress tracking."""

import pytest

from recipe_scraper.exceptions import DuplicateRecipeError, JobNotFoundError
from recipe_scraper.models import JobProgress, JobStatus
from recipe_scraper.resilience.progress_tracker import JobProgressTracker
from recipe_scraper.seed_sources import SOURCE_SITES, seed_source_sites

COUNTERS = {
    'urls_discovered': 3,
    'urls_processed': 2,
    'urls_succeeded': 1,
    'urls_failed': 1,
    'urls_skipped': 0,
}


def test_seeding_is_idempotent(storage):
    assert seed_source_sites(storage) == len(SOURCE_SITES)
    assert seed_source_sites(storage) == len(SOURCE_SITES)

    sites = storage.list_sites()
    assert len(sites) == 5
    bbc = storage.get_site_by_name('bbcgoodfood')
    assert len(bbc.categories) == 24
    assert bbc.search_results_selector == 'a.standard-card-new__article-title'


def test_upsert_updates_existing_site(storage, site):
    storage.upsert_site({'name': 'example', 'categories': ['soup'], 'is_active': False})

    updated = storage.get_site_by_name('example')
    assert updated.id == site.id
    assert updated.categories == ['soup']
    assert updated.display_name == 'Example Recipes'
    assert storage.get_active_sites() == []


def test_upsert_requires_name(storage):
    with pytest.raises(ValueError):
        storage.upsert_site({'display_name': 'No name'})


def test_duplicate_source_url_rejected(storage):
    storage.create_recipe({'source_url': 'https://www.example.com/recipes/a', 'name': 'A'})
    with pytest.raises(DuplicateRecipeError):
        storage.create_recipe({'source_url': 'https://www.example.com/recipes/a', 'name': 'A again'})
    assert storage.count_recipes() == 1


def test_job_lifecycle(storage, site):
    job_id = storage.create_job(source_site_id=site.id, category='chicken')
    assert storage.get_job_status(job_id) == JobStatus.PENDING

    assert storage.mark_job_running(job_id)
    assert storage.update_job_progress(job_id, COUNTERS)
    assert storage.get_job(job_id)['urls_processed'] == 2

    assert storage.finalize_job(job_id, JobStatus.COMPLETED, COUNTERS, None)
    job = storage.get_job(job_id)
    assert job['status'] == JobStatus.COMPLETED
    assert job['completed_at'] is not None


def test_finalized_job_is_immutable(storage):
    job_id = storage.create_job()
    storage.finalize_job(job_id, JobStatus.COMPLETED, COUNTERS)

    assert not storage.finalize_job(job_id, JobStatus.FAILED, COUNTERS, 'late failure')
    assert not storage.update_job_progress(job_id, dict(COUNTERS, urls_processed=99))
    assert not storage.cancel_job(job_id)
    assert not storage.mark_job_running(job_id)

    job = storage.get_job(job_id)
    assert job['status'] == JobStatus.COMPLETED
    assert job['urls_processed'] == 2
    assert job['error_log'] is None


def test_finalize_rejects_non_final_status(storage):
    job_id = storage.create_job()
    with pytest.raises(ValueError):
        storage.finalize_job(job_id, JobStatus.RUNNING, COUNTERS)


def test_cancel_job(storage):
    job_id = storage.create_job()
    storage.mark_job_running(job_id)

    assert storage.cancel_job(job_id)

    job = storage.get_job(job_id)
    assert job['status'] == JobStatus.FAILED
    assert job['error_log'] == 'Job cancelled by user'


def test_unknown_job(storage):
    assert storage.get_job('missing') is None
    assert storage.get_job_status('missing') is None
    with pytest.raises(JobNotFoundError):
        storage.cancel_job('missing')


def test_list_jobs_newest_first_with_filter(storage):
    ids = [storage.create_job(category=str(i)) for i in range(3)]
    storage.finalize_job(ids[0], JobStatus.COMPLETED, COUNTERS)

    jobs = storage.list_jobs()
    created = [j['created_at'] for j in jobs]
    assert created == sorted(created, reverse=True)
    assert {j['id'] for j in jobs} == set(ids)

    assert [j['id'] for j in storage.list_jobs(status=JobStatus.COMPLETED)] == [ids[0]]
    assert len(storage.list_jobs(limit=2)) == 2
    assert len(storage.list_jobs(limit=2, offset=2)) == 1


def test_job_progress_error_cap():
    progress = JobProgress(max_errors=100)
    for i in range(105):
        progress.record_processed()
        progress.record_failed(f'https://www.example.com/recipes/{i}', 'boom')

    assert progress.urls_failed == 105
    assert len(progress.errors) == 100
    assert progress.errors[0] == 'https://www.example.com/recipes/0: boom'
    assert progress.is_balanced()


def test_tracker_flushes_on_interval(storage):
    job_id = storage.create_job()
    storage.mark_job_running(job_id)
    tracker = JobProgressTracker(storage, job_id, flush_interval=5)

    tracker.record_discovered(8)
    assert storage.get_job(job_id)['urls_discovered'] == 8

    for _ in range(4):
        tracker.record_processed()
        tracker.record_skipped()
        assert not tracker.maybe_flush()
    assert storage.get_job(job_id)['urls_processed'] == 0

    tracker.record_processed()
    tracker.record_succeeded()
    assert tracker.maybe_flush()
    assert storage.get_job(job_id)['urls_processed'] == 5


def test_tracker_sees_cancellation(storage):
    job_id = storage.create_job()
    storage.mark_job_running(job_id)
    tracker = JobProgressTracker(storage, job_id)

    assert not tracker.is_cancelled()
    storage.cancel_job(job_id)
    assert tracker.is_cancelled()
    assert not tracker.flush()
    assert not tracker.finalize(JobStatus.COMPLETED)
