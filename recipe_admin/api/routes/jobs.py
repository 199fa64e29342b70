"""Scraping job routes.

POST /jobs creates the job row up front and runs the sweep as a background
task, so the caller gets the job id immediately and polls GET /jobs/{id}.
"""
from typing import Optional
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query

from recipe_admin.core.config import settings
from recipe_admin.core.database import get_job_runner, get_storage
from recipe_admin.schemas import CreateJobRequest, JobListResponse, JobResponse
from recipe_scraper.config import JobOptions
from recipe_scraper.database_storage import DatabaseStorage
from recipe_scraper.exceptions import JobNotFoundError, SiteNotFoundError
from recipe_scraper.job_runner import JobRunner
from recipe_scraper.models import JobStatus

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("", response_model=JobListResponse)
def list_jobs(
    status: Optional[str] = Query(None, description="pending, running, completed or failed"),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    offset: int = Query(0, ge=0),
    storage: DatabaseStorage = Depends(get_storage),
):
    """List scraping jobs, newest first."""
    if status and status not in JobStatus.ALL:
        raise HTTPException(status_code=400, detail=f"Invalid status: {status}")
    return {
        "items": storage.list_jobs(status=status, limit=limit, offset=offset),
        "limit": limit,
        "offset": offset,
    }


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: str, storage: DatabaseStorage = Depends(get_storage)):
    """Get one job's status and counters."""
    job = storage.get_job(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return job


@router.post("", response_model=JobResponse, status_code=202)
def start_job(
    request: CreateJobRequest,
    background_tasks: BackgroundTasks,
    runner: JobRunner = Depends(get_job_runner),
):
    """Create a job and run it in the background."""
    options = JobOptions(**request.model_dump())
    try:
        job_id = runner.create_job(options)
    except SiteNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    background_tasks.add_task(runner.run_job, options, job_id)
    print(f"✓ Queued scraping job {job_id}")
    return runner.get_job_status(job_id)


@router.post("/{job_id}/cancel", response_model=JobResponse)
def cancel_job(job_id: str, storage: DatabaseStorage = Depends(get_storage)):
    """Mark a job failed; a running sweep stops at its next URL."""
    try:
        storage.cancel_job(job_id)
    except JobNotFoundError:
        raise HTTPException(status_code=404, detail="Job not found")
    return storage.get_job(job_id)
