"""
SQLAlchemy database models for the recipe pipeline.
Supports SQLite (default) and PostgreSQL backends.
"""

import json
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import (
    Boolean, Column, DateTime, Float, ForeignKey, Index, Integer, String, Text,
    UniqueConstraint
)
from sqlalchemy.orm import declarative_base, relationship

from .models import JobStatus, NutritionSource

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    return str(uuid.uuid4())


def _load_json(raw: Optional[str], default):
    try:
        return json.loads(raw) if raw else default
    except json.JSONDecodeError:
        return default


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class SourceSite(Base):
    """A configured external recipe site."""
    __tablename__ = 'recipe_source_sites'

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False)
    display_name = Column(String(200), nullable=False)
    base_url = Column(String(500), nullable=False)
    search_url_pattern = Column(String(500), nullable=False)
    search_results_selector = Column(String(300))
    is_active = Column(Boolean, default=True, nullable=False)
    last_scraped_at = Column(DateTime)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    _categories = Column('categories', Text, default='[]')

    recipes = relationship("MasterRecipe", back_populates="source_site")

    __table_args__ = (
        UniqueConstraint('name', name='unique_source_site_name'),
    )

    @property
    def categories(self) -> List[str]:
        """Get category query terms as list."""
        return _load_json(self._categories, [])

    @categories.setter
    def categories(self, value: List[str]):
        self._categories = json.dumps(list(value)) if value else '[]'

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'display_name': self.display_name,
            'base_url': self.base_url,
            'search_url_pattern': self.search_url_pattern,
            'search_results_selector': self.search_results_selector,
            'categories': self.categories,
            'is_active': bool(self.is_active),
            'last_scraped_at': _isoformat(self.last_scraped_at),
        }


class ScrapingJob(Base):
    """Progress ledger for one orchestration run."""
    __tablename__ = 'recipe_scraping_jobs'

    id = Column(String(36), primary_key=True, default=new_id)
    source_site_id = Column(String(36), ForeignKey('recipe_source_sites.id', ondelete='SET NULL'))
    category = Column(String(100))
    status = Column(String(20), default=JobStatus.PENDING, nullable=False)

    urls_discovered = Column(Integer, default=0, nullable=False)
    urls_processed = Column(Integer, default=0, nullable=False)
    urls_succeeded = Column(Integer, default=0, nullable=False)
    urls_failed = Column(Integer, default=0, nullable=False)
    urls_skipped = Column(Integer, default=0, nullable=False)
    error_log = Column(Text)

    started_at = Column(DateTime)
    completed_at = Column(DateTime)
    created_at = Column(DateTime, default=utcnow)

    __table_args__ = (
        Index('idx_job_status', 'status'),
        Index('idx_job_created', 'created_at'),
    )

    @property
    def is_final(self) -> bool:
        return self.status in JobStatus.FINAL

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'source_site_id': self.source_site_id,
            'category': self.category,
            'status': self.status,
            'urls_discovered': self.urls_discovered or 0,
            'urls_processed': self.urls_processed or 0,
            'urls_succeeded': self.urls_succeeded or 0,
            'urls_failed': self.urls_failed or 0,
            'urls_skipped': self.urls_skipped or 0,
            'error_log': self.error_log,
            'started_at': _isoformat(self.started_at),
            'completed_at': _isoformat(self.completed_at),
            'created_at': _isoformat(self.created_at),
        }


class MasterRecipe(Base):
    """Canonical imported recipe, one per source URL."""
    __tablename__ = 'master_recipes'

    id = Column(String(36), primary_key=True, default=new_id)
    source_url = Column(String(1000), nullable=False)
    source_site_id = Column(String(36), ForeignKey('recipe_source_sites.id', ondelete='SET NULL'))
    source_scraped_at = Column(DateTime, default=utcnow)

    name = Column(String(500), nullable=False)
    description = Column(Text)
    image_url = Column(String(1000))
    servings = Column(Integer)
    prep_time_minutes = Column(Integer)
    cook_time_minutes = Column(Integer)
    total_time_minutes = Column(Integer)
    cuisine_type = Column(String(100))

    calories_per_serving = Column(Integer)
    protein_per_serving = Column(Float)
    carbs_per_serving = Column(Float)
    fat_per_serving = Column(Float)
    fiber_per_serving = Column(Float)
    sugar_per_serving = Column(Float)
    sodium_per_serving = Column(Integer)
    nutrition_source = Column(String(50), default=NutritionSource.SOURCE_SITE)

    data_quality_score = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow)

    # JSON fields (stored as JSON strings)
    _meal_category = Column('meal_category', Text, default='[]')
    _dietary_tags = Column('dietary_tags', Text, default='[]')
    _ingredients = Column('ingredients', Text, default='[]')
    _ingredient_names = Column('ingredient_names', Text, default='[]')
    _instructions = Column('instructions', Text, default='[]')
    _allergens = Column('allergens', Text, default='[]')

    source_site = relationship("SourceSite", back_populates="recipes")

    __table_args__ = (
        UniqueConstraint('source_url', name='unique_master_recipe_source_url'),
        Index('idx_recipe_site', 'source_site_id'),
        Index('idx_recipe_active_quality', 'is_active', 'data_quality_score'),
    )

    @property
    def meal_category(self) -> List[str]:
        return _load_json(self._meal_category, [])

    @meal_category.setter
    def meal_category(self, value: List[str]):
        self._meal_category = json.dumps(value) if value else '[]'

    @property
    def dietary_tags(self) -> List[str]:
        return _load_json(self._dietary_tags, [])

    @dietary_tags.setter
    def dietary_tags(self, value: List[str]):
        self._dietary_tags = json.dumps(value) if value else '[]'

    @property
    def ingredients(self) -> List[dict]:
        """Structured ingredients: name, quantity, unit, category, original."""
        return _load_json(self._ingredients, [])

    @ingredients.setter
    def ingredients(self, value: List[dict]):
        self._ingredients = json.dumps(value) if value else '[]'

    @property
    def ingredient_names(self) -> List[str]:
        return _load_json(self._ingredient_names, [])

    @ingredient_names.setter
    def ingredient_names(self, value: List[str]):
        self._ingredient_names = json.dumps(value) if value else '[]'

    @property
    def instructions(self) -> List[dict]:
        return _load_json(self._instructions, [])

    @instructions.setter
    def instructions(self, value: List[dict]):
        self._instructions = json.dumps(value) if value else '[]'

    @property
    def allergens(self) -> List[str]:
        return _load_json(self._allergens, [])

    @allergens.setter
    def allergens(self, value: List[str]):
        self._allergens = json.dumps(sorted(value)) if value else '[]'

    def to_dict(self) -> dict:
        """Convert recipe to dictionary format."""
        return {
            'id': self.id,
            'source_url': self.source_url,
            'source_site_id': self.source_site_id,
            'source_scraped_at': _isoformat(self.source_scraped_at),
            'name': self.name,
            'description': self.description,
            'image_url': self.image_url,
            'servings': self.servings,
            'prep_time_minutes': self.prep_time_minutes,
            'cook_time_minutes': self.cook_time_minutes,
            'total_time_minutes': self.total_time_minutes,
            'cuisine_type': self.cuisine_type,
            'meal_category': self.meal_category,
            'dietary_tags': self.dietary_tags,
            'ingredients': self.ingredients,
            'ingredient_names': self.ingredient_names,
            'instructions': self.instructions,
            'calories_per_serving': self.calories_per_serving,
            'protein_per_serving': self.protein_per_serving,
            'carbs_per_serving': self.carbs_per_serving,
            'fat_per_serving': self.fat_per_serving,
            'fiber_per_serving': self.fiber_per_serving,
            'sugar_per_serving': self.sugar_per_serving,
            'sodium_per_serving': self.sodium_per_serving,
            'nutrition_source': self.nutrition_source,
            'allergens': self.allergens,
            'data_quality_score': self.data_quality_score,
            'is_active': bool(self.is_active),
        }


def enable_sqlite_foreign_keys(dbapi_conn, connection_record):
    """Enable foreign key support for SQLite."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
