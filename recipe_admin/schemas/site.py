"""Source site schemas."""
from typing import List, Optional
from pydantic import BaseModel


class SiteResponse(BaseModel):
    """Configured recipe source site."""
    id: str
    name: str
    display_name: str
    base_url: str
    search_url_pattern: str
    search_results_selector: Optional[str] = None
    categories: List[str] = []
    is_active: bool
    last_scraped_at: Optional[str] = None
