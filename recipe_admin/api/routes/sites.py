"""Source site routes."""
from typing import List
from fastapi import APIRouter, Depends

from recipe_admin.core.database import get_storage
from recipe_admin.schemas import SiteResponse
from recipe_scraper.database_storage import DatabaseStorage

router = APIRouter(prefix="/sites", tags=["sites"])


@router.get("", response_model=List[SiteResponse])
def list_sites(storage: DatabaseStorage = Depends(get_storage)):
    """List configured source sites."""
    return storage.list_sites()
