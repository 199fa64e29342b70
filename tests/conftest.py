"""Shared fixtures and in-process fakes for the pipeline tests."""

import pytest
import requests

from recipe_scraper.config import ScraperConfig
from recipe_scraper.database_storage import DatabaseStorage
from recipe_scraper.job_runner import JobRunner
from recipe_scraper.models import NutritionEstimate
from recipe_scraper.recipe_importer import RecipeImporter
from recipe_scraper.resilience.content_discovery import ContentDiscovery
from recipe_scraper.resilience.retry_handler import RetryHandler

BASE_URL = 'https://www.example.com'


def full_recipe_payload(name='Lemon Chicken Traybake'):
    """Parser output for a complete recipe that scores 100."""
    return {
        'recipeName': name,
        'description': 'A simple one-tray dinner with lemon and thyme.',
        'imageUrl': 'https://www.example.com/images/lemon-chicken.jpg',
        'servings': 4,
        'prepTimeMinutes': 10,
        'cookTimeMinutes': 35,
        'cuisineType': 'British',
        'mealType': ['Dinner'],
        'isDairyFree': True,
        'containsNuts': False,
        'ingredients': [
            {'ingredientName': 'chicken thighs', 'quantity': 8, 'unit': '', 'notes': '8 chicken thighs'},
            {'ingredientName': 'lemon', 'quantity': 1, 'unit': ''},
            {'ingredientName': 'butter', 'quantity': '1 1/2', 'unit': 'tbsp'},
        ],
        'instructions': [
            {'stepNumber': 1, 'instruction': 'Heat the oven to 200C.'},
            {'stepNumber': 2, 'instruction': 'Roast everything for 35 mins.'},
        ],
        'caloriesPerServing': 420,
        'proteinPerServing': 35,
    }


def search_page(*hrefs):
    """Search results page with one generic recipe card per href."""
    cards = ''.join(f'<div class="recipe-card"><a href="{h}">Recipe</a></div>' for h in hrefs)
    return f'<html><body><main>{cards}</main></body></html>'


class FakeFetcher:
    """Serves canned HTML by URL; unknown URLs raise an HTTP 404 error."""

    def __init__(self, pages=None, default=None):
        self.pages = dict(pages or {})
        self.default = default
        self.calls = []

    def fetch(self, url):
        self.calls.append(url)
        page = self.pages.get(url, self.default)
        if isinstance(page, Exception):
            raise page
        if page is None:
            raise requests.HTTPError(f"404 Client Error: Not Found for url: {url}")
        return page


class FakeParser:
    """Returns canned payloads by URL, optionally running a hook first."""

    def __init__(self, payloads=None, on_parse=None):
        self.payloads = dict(payloads or {})
        self.on_parse = on_parse
        self.calls = []

    def parse(self, url, html):
        self.calls.append(url)
        if self.on_parse:
            self.on_parse(url)
        payload = self.payloads.get(url)
        if isinstance(payload, Exception):
            raise payload
        return payload


class FakeNutrition:
    def __init__(self, estimate=None, error=None):
        self.estimate_result = estimate or NutritionEstimate(
            calories_per_serving=200,
            protein_per_serving=6.0,
            carbs_per_serving=30.0,
            fat_per_serving=5.0,
            fiber_per_serving=2.0,
            sugar_per_serving=3.0,
            sodium_per_serving=300,
        )
        self.error = error
        self.calls = 0

    def estimate(self, ingredients, servings):
        self.calls += 1
        if self.error:
            raise self.error
        return self.estimate_result


class SleepRecorder:
    """Drop-in for time.sleep that records instead of waiting."""

    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def storage(tmp_path):
    db = DatabaseStorage(database_path=str(tmp_path / 'recipes.db'))
    yield db
    db.close()


@pytest.fixture
def site(storage):
    return storage.upsert_site({
        'name': 'example',
        'display_name': 'Example Recipes',
        'base_url': BASE_URL,
        'search_url_pattern': '/search?q={query}&page={page}',
        'search_results_selector': None,
        'categories': ['chicken', 'pasta'],
        'is_active': True,
    })


@pytest.fixture
def sleeps():
    return SleepRecorder()


@pytest.fixture
def config():
    return ScraperConfig()


def make_runner(storage, fetcher, parser, sleeps, nutrition=None, config=None):
    """JobRunner wired with fakes and the real discovery/import logic."""
    config = config or ScraperConfig()
    discovery = ContentDiscovery(fetcher, RetryHandler(config.retry, sleep_func=sleeps), sleep_func=sleeps)
    importer = RecipeImporter(
        storage=storage,
        fetcher=fetcher,
        parser=parser,
        nutrition_estimator=nutrition,
        config=config
    )
    return JobRunner(storage, discovery, importer, config=config, sleep_func=sleeps)
