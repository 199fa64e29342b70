"""Scraping job schemas."""
from typing import List, Optional
from pydantic import BaseModel, Field


class CreateJobRequest(BaseModel):
    """Filters and pacing for a new scraping job."""
    site_name: Optional[str] = None
    category: Optional[str] = None
    max_pages_per_category: int = Field(2, ge=1, le=20)
    delay_between_urls: float = Field(2.5, ge=0)
    delay_between_categories: float = Field(3.0, ge=0)
    delay_between_pages: float = Field(1.5, ge=0)


class JobResponse(BaseModel):
    """Scraping job row."""
    id: str
    source_site_id: Optional[str] = None
    category: Optional[str] = None
    status: str
    urls_discovered: int = 0
    urls_processed: int = 0
    urls_succeeded: int = 0
    urls_failed: int = 0
    urls_skipped: int = 0
    error_log: Optional[str] = None
    started_at: Optional[str] = None
    completed_at: Optional[str] = None
    created_at: Optional[str] = None


class JobListResponse(BaseModel):
    """Page of jobs, newest first."""
    items: List[JobResponse]
    limit: int
    offset: int
