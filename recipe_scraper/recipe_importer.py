"""
Imports a single recipe URL into the master recipe database.
"""

from dataclasses import asdict
from typing import Callable, Dict, List, Optional, TYPE_CHECKING

from .allergens import detect_allergens
from .config import ScraperConfig
from .db_models import utcnow
from .exceptions import DuplicateRecipeError
from .models import ImportResult, NutritionSource, ParsedRecipeData
from .quality_score import calculate_quality_score
from .recipe_normalizer import normalize_recipe, parse_raw_recipe

if TYPE_CHECKING:
    from .database_storage import DatabaseStorage
    from .db_models import SourceSite
    from .resilience.rate_limiter import RateLimiter

ALREADY_IMPORTED = "Already in master database"


class RecipeImporter:
    """
    Fetches, parses, enriches and stores one recipe per call.
    Never raises: every outcome is reported as an ImportResult.
    """

    def __init__(
        self,
        storage: "DatabaseStorage",
        fetcher,
        parser,
        nutrition_estimator=None,
        config: Optional[ScraperConfig] = None
    ):
        """
        Initialize importer.

        Args:
            storage: DatabaseStorage for master recipes
            fetcher: Object with fetch(url) -> html
            parser: Object with parse(url, html) -> dict or None
            nutrition_estimator: Object with estimate(ingredients, servings), optional
            config: ScraperConfig instance, uses defaults if None
        """
        self.storage = storage
        self.fetcher = fetcher
        self.parser = parser
        self.nutrition_estimator = nutrition_estimator
        self.config = config or ScraperConfig()

    def import_url(self, url: str, site: Optional["SourceSite"] = None) -> ImportResult:
        """
        Import one recipe URL.

        Args:
            url: Recipe page URL
            site: Source site the URL was discovered on

        Returns:
            ImportResult describing success, skip or failure
        """
        try:
            existing_id = self.storage.find_recipe_id(url)
            if existing_id:
                return ImportResult(success=True, recipe_id=existing_id, skipped=True, reason=ALREADY_IMPORTED)

            html = self.fetcher.fetch(url)

            payload = self.parser.parse(url, html)
            raw = parse_raw_recipe(payload)
            if raw is None:
                return ImportResult(success=False, error="Parser returned no data")

            recipe = normalize_recipe(raw, default_servings=self.config.default_servings)
            if not recipe.name:
                return ImportResult(success=False, error="Missing recipe name")
            if not recipe.ingredients:
                return ImportResult(success=False, error="Missing ingredients")

            if not recipe.nutrition_source:
                recipe.nutrition_source = NutritionSource.SOURCE_SITE
            if not recipe.calories_per_serving:
                self._backfill_nutrition(recipe)

            allergens = detect_allergens(recipe.ingredients)
            quality_score = calculate_quality_score(recipe)

            data = self._build_record(url, site, recipe, allergens, quality_score)
            try:
                recipe_id = self.storage.create_recipe(data)
            except DuplicateRecipeError:
                return ImportResult(
                    success=True,
                    recipe_id=self.storage.find_recipe_id(url),
                    skipped=True,
                    reason=ALREADY_IMPORTED
                )

            status = "active" if data['is_active'] else "hidden"
            print(f"  ✓ Imported: {recipe.name} (score {quality_score}, {status})")
            return ImportResult(success=True, recipe_id=recipe_id)

        except Exception as e:
            return ImportResult(success=False, error=str(e) or e.__class__.__name__)

    def _backfill_nutrition(self, recipe: ParsedRecipeData):
        """Estimate macros when the page had none. Failures leave the recipe unchanged."""
        if not self.nutrition_estimator:
            return
        try:
            nutrition = self.nutrition_estimator.estimate(recipe.ingredients, recipe.servings)
        except Exception as e:
            print(f"  Nutrition estimate failed for {recipe.name}: {e}")
            return

        recipe.apply_nutrition(nutrition)
        recipe.nutrition_source = NutritionSource.AI_ESTIMATED

    def _build_record(
        self,
        url: str,
        site: Optional["SourceSite"],
        recipe: ParsedRecipeData,
        allergens: List[str],
        quality_score: int
    ) -> Dict:
        if recipe.prep_time_minutes is None and recipe.cook_time_minutes is None:
            total_time = None
        else:
            total_time = (recipe.prep_time_minutes or 0) + (recipe.cook_time_minutes or 0)

        return {
            'source_url': url,
            'source_site_id': site.id if site else None,
            'source_scraped_at': utcnow(),
            'name': recipe.name,
            'description': recipe.description,
            'image_url': recipe.image_url,
            'servings': recipe.servings,
            'prep_time_minutes': recipe.prep_time_minutes,
            'cook_time_minutes': recipe.cook_time_minutes,
            'total_time_minutes': total_time,
            'cuisine_type': recipe.cuisine_type,
            'meal_category': recipe.meal_category,
            'dietary_tags': recipe.dietary_tags,
            'ingredients': [asdict(i) for i in recipe.ingredients],
            'ingredient_names': [i.name.lower() for i in recipe.ingredients],
            'instructions': [asdict(s) for s in recipe.instructions],
            'calories_per_serving': recipe.calories_per_serving,
            'protein_per_serving': recipe.protein_per_serving,
            'carbs_per_serving': recipe.carbs_per_serving,
            'fat_per_serving': recipe.fat_per_serving,
            'fiber_per_serving': recipe.fiber_per_serving,
            'sugar_per_serving': recipe.sugar_per_serving,
            'sodium_per_serving': recipe.sodium_per_serving,
            'nutrition_source': recipe.nutrition_source,
            'allergens': allergens,
            'data_quality_score': quality_score,
            'is_active': quality_score >= self.config.quality_threshold,
        }

    def batch_import(
        self,
        urls: List[str],
        site: Optional["SourceSite"] = None,
        rate_limiter: Optional["RateLimiter"] = None,
        on_progress: Optional[Callable[[int, int, str, ImportResult], None]] = None
    ) -> Dict[str, List]:
        """
        Import URLs one at a time.

        Args:
            urls: Recipe URLs
            site: Source site for all URLs
            rate_limiter: Waits between URLs after each non-skipped import
            on_progress: Called with (index, total, url, result) after each URL

        Returns:
            Dict with succeeded (ids), skipped (urls) and failed ("url: error") lists
        """
        results = {'succeeded': [], 'skipped': [], 'failed': []}
        total = len(urls)

        for i, url in enumerate(urls, 1):
            result = self.import_url(url, site)

            if result.skipped:
                results['skipped'].append(url)
            elif result.success:
                results['succeeded'].append(result.recipe_id)
            else:
                results['failed'].append(f"{url}: {result.error}")
                print(f"  ✗ [{i}/{total}] {url}: {result.error}")

            if on_progress:
                on_progress(i, total, url, result)

            if rate_limiter and not result.skipped:
                rate_limiter.wait_between_urls()

        print(f"Batch import finished: {len(results['succeeded'])} imported, "
              f"{len(results['skipped'])} skipped, {len(results['failed'])} failed")
        return results
