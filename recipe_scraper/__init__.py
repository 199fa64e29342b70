"""
Recipe acquisition pipeline: discovers recipe pages on external sites,
imports them into the master recipe database and tracks scraping jobs.
"""

from .config import JobOptions, ScraperConfig
from .job_runner import JobRunner
from .recipe_importer import RecipeImporter

__version__ = "1.0.0"

__all__ = [
    'JobOptions',
    'JobRunner',
    'RecipeImporter',
    'ScraperConfig',
]
