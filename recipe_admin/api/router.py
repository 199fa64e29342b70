"""Main API router - aggregates all route modules."""
from fastapi import APIRouter

from recipe_admin.api.routes import jobs, sites

api_router = APIRouter(prefix="/api")

api_router.include_router(sites.router)
api_router.include_router(jobs.router)
