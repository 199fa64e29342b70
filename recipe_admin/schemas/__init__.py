"""Pydantic schemas."""
from recipe_admin.schemas.job import (
    CreateJobRequest,
    JobListResponse,
    JobResponse,
)
from recipe_admin.schemas.site import SiteResponse

__all__ = [
    "CreateJobRequest",
    "JobListResponse",
    "JobResponse",
    "SiteResponse",
]
