"""Tests for importing single recipe URLs."""

from recipe_scraper.models import NutritionSource
from recipe_scraper.recipe_importer import RecipeImporter

from conftest import BASE_URL, FakeFetcher, FakeNutrition, FakeParser, full_recipe_payload

URL = f'{BASE_URL}/recipes/lemon-chicken'
TOAST = {'recipeName': 'Plain Toast', 'ingredients': ['2 slices bread']}


def make_importer(storage, payloads, nutrition=None, fetcher=None, on_parse=None):
    fetcher = fetcher or FakeFetcher(default='<html><body>recipe</body></html>')
    parser = FakeParser(payloads, on_parse=on_parse)
    return RecipeImporter(storage, fetcher, parser, nutrition_estimator=nutrition), fetcher, parser


def test_imports_complete_recipe(storage, site):
    importer, _, _ = make_importer(storage, {URL: full_recipe_payload()})

    result = importer.import_url(URL, site)

    assert result.success and not result.skipped
    recipe = storage.get_recipe(result.recipe_id)
    assert recipe['name'] == 'Lemon Chicken Traybake'
    assert recipe['source_site_id'] == site.id
    assert recipe['total_time_minutes'] == 45
    assert recipe['allergens'] == ['dairy']
    assert recipe['ingredient_names'] == ['chicken thighs', 'lemon', 'butter']
    assert recipe['instructions'][0] == {'step_number': 1, 'instruction': 'Heat the oven to 200C.'}
    assert recipe['nutrition_source'] == NutritionSource.SOURCE_SITE
    assert recipe['data_quality_score'] == 100
    assert recipe['is_active'] is True


def test_second_import_is_skipped_without_network(storage, site):
    importer, fetcher, parser = make_importer(storage, {URL: full_recipe_payload()})

    first = importer.import_url(URL, site)
    second = importer.import_url(URL, site)

    assert second.success and second.skipped
    assert second.reason == 'Already in master database'
    assert second.recipe_id == first.recipe_id
    assert fetcher.calls == [URL]
    assert parser.calls == [URL]
    assert storage.count_recipes() == 1


def test_parser_returned_nothing(storage, site):
    importer, _, _ = make_importer(storage, {URL: None})
    result = importer.import_url(URL, site)
    assert not result.success
    assert result.error == 'Parser returned no data'


def test_missing_name(storage, site):
    payload = full_recipe_payload()
    del payload['recipeName']
    importer, _, _ = make_importer(storage, {URL: payload})
    assert importer.import_url(URL, site).error == 'Missing recipe name'


def test_missing_ingredients_stores_nothing(storage, site):
    payload = full_recipe_payload()
    payload['ingredients'] = []
    importer, _, _ = make_importer(storage, {URL: payload})

    result = importer.import_url(URL, site)

    assert not result.success
    assert result.error == 'Missing ingredients'
    assert storage.count_recipes() == 0


def test_fetch_error_becomes_failure(storage, site):
    importer, _, parser = make_importer(storage, {}, fetcher=FakeFetcher())
    result = importer.import_url(URL, site)
    assert not result.success
    assert '404' in result.error
    assert parser.calls == []


def test_parser_exception_becomes_failure(storage, site):
    importer, _, _ = make_importer(storage, {URL: RuntimeError('rate limited')})
    result = importer.import_url(URL, site)
    assert not result.success
    assert result.error == 'rate limited'


def test_nutrition_backfill_makes_recipe_visible(storage, site):
    nutrition = FakeNutrition()
    importer, _, _ = make_importer(storage, {URL: TOAST}, nutrition=nutrition)

    result = importer.import_url(URL, site)

    recipe = storage.get_recipe(result.recipe_id)
    assert nutrition.calls == 1
    assert recipe['nutrition_source'] == NutritionSource.AI_ESTIMATED
    assert recipe['calories_per_serving'] == 200
    assert recipe['sodium_per_serving'] == 300
    assert recipe['servings'] == 4
    assert recipe['data_quality_score'] == 50
    assert recipe['is_active'] is True


def test_nutrition_failure_is_swallowed(storage, site):
    nutrition = FakeNutrition(error=ValueError('no estimate'))
    importer, _, _ = make_importer(storage, {URL: TOAST}, nutrition=nutrition)

    result = importer.import_url(URL, site)

    assert result.success
    recipe = storage.get_recipe(result.recipe_id)
    assert recipe['nutrition_source'] == NutritionSource.SOURCE_SITE
    assert recipe['calories_per_serving'] is None
    assert recipe['total_time_minutes'] is None
    assert recipe['data_quality_score'] == 35
    assert recipe['is_active'] is False


def test_nutrition_not_called_when_page_has_calories(storage, site):
    nutrition = FakeNutrition()
    importer, _, _ = make_importer(storage, {URL: full_recipe_payload()}, nutrition=nutrition)
    importer.import_url(URL, site)
    assert nutrition.calls == 0


def test_concurrent_import_becomes_skip(storage, site):
    """Another worker stores the URL between the existence check and the insert."""
    def import_elsewhere(url):
        storage.create_recipe({'source_url': url, 'name': 'Stored elsewhere'})

    importer, _, _ = make_importer(storage, {URL: full_recipe_payload()}, on_parse=import_elsewhere)

    result = importer.import_url(URL, site)

    assert result.success and result.skipped
    assert result.reason == 'Already in master database'
    assert result.recipe_id == storage.find_recipe_id(URL)
    assert storage.count_recipes() == 1


def test_batch_import(storage, site, sleeps):
    from recipe_scraper.config import RateLimitConfig
    from recipe_scraper.resilience.rate_limiter import RateLimiter

    good = f'{BASE_URL}/recipes/good'
    bad = f'{BASE_URL}/recipes/bad'
    importer, _, _ = make_importer(storage, {good: full_recipe_payload(), bad: None})
    limiter = RateLimiter(RateLimitConfig(delay_between_urls=2.5), sleep_func=sleeps)

    results = importer.batch_import([good, bad, good], site, rate_limiter=limiter)

    assert len(results['succeeded']) == 1
    assert results['skipped'] == [good]
    assert results['failed'] == [f'{bad}: Parser returned no data']
    assert sleeps.calls == [2.5, 2.5]
