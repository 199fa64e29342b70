"""
Data models for the recipe acquisition pipeline.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import List, Optional


class JobStatus:
    """Lifecycle states of a scraping job."""
    PENDING = 'pending'
    RUNNING = 'running'
    COMPLETED = 'completed'
    FAILED = 'failed'

    ALL = (PENDING, RUNNING, COMPLETED, FAILED)
    FINAL = (COMPLETED, FAILED)


class NutritionSource:
    SOURCE_SITE = 'source_site'
    AI_ESTIMATED = 'ai_estimated'


ALLERGEN_CATEGORIES = (
    'dairy',
    'gluten',
    'nuts',
    'peanuts',
    'eggs',
    'shellfish',
    'fish',
    'soy',
    'sesame',
    'celery',
    'mustard',
    'sulphites',
)


@dataclass
class DiscoveryResult:
    """URLs found for one (site, category) sweep."""
    urls: List[str]
    site: str
    category: str
    scraped_at: datetime


@dataclass
class ImportResult:
    """Outcome of importing a single URL."""
    success: bool
    recipe_id: Optional[str] = None
    error: Optional[str] = None
    skipped: bool = False
    reason: Optional[str] = None


@dataclass
class ParsedIngredient:
    name: str
    quantity: float = 0
    unit: str = ''
    original: str = ''
    category: Optional[str] = None


@dataclass
class ParsedInstruction:
    step_number: int
    instruction: str


@dataclass
class NutritionEstimate:
    """Per-serving macros returned by the nutrition service."""
    calories_per_serving: Optional[int] = None
    protein_per_serving: Optional[float] = None
    carbs_per_serving: Optional[float] = None
    fat_per_serving: Optional[float] = None
    fiber_per_serving: Optional[float] = None
    sugar_per_serving: Optional[float] = None
    sodium_per_serving: Optional[int] = None


@dataclass
class ParsedRecipeData:
    """Canonical recipe shape produced by normalization."""
    name: str
    ingredients: List[ParsedIngredient] = field(default_factory=list)
    instructions: List[ParsedInstruction] = field(default_factory=list)
    description: Optional[str] = None
    image_url: Optional[str] = None
    servings: Optional[int] = None
    prep_time_minutes: Optional[int] = None
    cook_time_minutes: Optional[int] = None
    cuisine_type: Optional[str] = None
    meal_category: List[str] = field(default_factory=list)
    dietary_tags: List[str] = field(default_factory=list)
    calories_per_serving: Optional[int] = None
    protein_per_serving: Optional[float] = None
    carbs_per_serving: Optional[float] = None
    fat_per_serving: Optional[float] = None
    fiber_per_serving: Optional[float] = None
    sugar_per_serving: Optional[float] = None
    sodium_per_serving: Optional[int] = None
    nutrition_source: Optional[str] = None

    def apply_nutrition(self, nutrition: NutritionEstimate):
        """Copy estimated macros onto the recipe."""
        for key, value in asdict(nutrition).items():
            setattr(self, key, value)


@dataclass
class JobProgress:
    """Running counters for a scraping job."""
    urls_discovered: int = 0
    urls_processed: int = 0
    urls_succeeded: int = 0
    urls_failed: int = 0
    urls_skipped: int = 0
    errors: List[str] = field(default_factory=list)
    max_errors: int = 100

    def record_discovered(self, count: int):
        self.urls_discovered += count

    def record_processed(self):
        self.urls_processed += 1

    def record_succeeded(self):
        self.urls_succeeded += 1

    def record_skipped(self):
        self.urls_skipped += 1

    def record_failed(self, url: str, error: str):
        """Count a failure and keep its message while the log has room."""
        self.urls_failed += 1
        if len(self.errors) < self.max_errors:
            self.errors.append(f"{url}: {error}")

    def is_balanced(self) -> bool:
        """Every processed URL has exactly one outcome."""
        return self.urls_succeeded + self.urls_failed + self.urls_skipped == self.urls_processed

    def counters(self) -> dict:
        return {
            'urls_discovered': self.urls_discovered,
            'urls_processed': self.urls_processed,
            'urls_succeeded': self.urls_succeeded,
            'urls_failed': self.urls_failed,
            'urls_skipped': self.urls_skipped,
        }


@dataclass
class ScrapingJobResult:
    """Result of a job run."""
    job_id: str
    status: str
    urls_discovered: int = 0
    urls_processed: int = 0
    urls_succeeded: int = 0
    urls_failed: int = 0
    urls_skipped: int = 0
    errors: List[str] = field(default_factory=list)
    started_at: Optional[str] = None
    completed_at: Optional[str] = None
    duration_seconds: float = 0.0
