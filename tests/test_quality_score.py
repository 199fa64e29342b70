"""Tests for recipe completeness scoring."""

from dataclasses import replace

from recipe_scraper.models import ParsedIngredient, ParsedInstruction, ParsedRecipeData
from recipe_scraper.quality_score import (
    calculate_quality_score, get_quality_breakdown, get_quality_tier, meets_quality_threshold
)


def complete_recipe():
    return ParsedRecipeData(
        name='Lemon Chicken',
        ingredients=[ParsedIngredient(name=n) for n in ('chicken', 'lemon', 'thyme')],
        instructions=[ParsedInstruction(1, 'Heat oven.'), ParsedInstruction(2, 'Roast.')],
        description='A simple one-tray dinner with lemon.',
        image_url='https://example.com/a.jpg',
        servings=4,
        prep_time_minutes=10,
        cuisine_type='British',
        meal_category=['dinner'],
        calories_per_serving=420,
        protein_per_serving=35.0,
    )


def test_complete_recipe_scores_100():
    assert calculate_quality_score(complete_recipe()) == 100


def test_empty_recipe_scores_0():
    assert calculate_quality_score(ParsedRecipeData(name='')) == 0


def test_name_and_single_ingredient():
    recipe = ParsedRecipeData(name='Toast', ingredients=[ParsedIngredient(name='bread')])
    assert calculate_quality_score(recipe) == 30


def test_image_must_be_http():
    recipe = replace(complete_recipe(), image_url='/images/a.jpg')
    assert calculate_quality_score(recipe) == 90


def test_short_description_not_counted():
    recipe = replace(complete_recipe(), description='Tasty.')
    assert calculate_quality_score(recipe) == 95


def test_adding_fields_never_lowers_score():
    recipe = ParsedRecipeData(name='Toast')
    previous = calculate_quality_score(recipe)
    for changes in (
        {'ingredients': [ParsedIngredient(name='bread')]},
        {'servings': 2},
        {'cook_time_minutes': 5},
        {'calories_per_serving': 150},
        {'ingredients': [ParsedIngredient(name=n) for n in ('bread', 'butter', 'jam')]},
    ):
        recipe = replace(recipe, **changes)
        score = calculate_quality_score(recipe)
        assert score >= previous
        previous = score


def test_breakdown_matches_score():
    breakdown = get_quality_breakdown(ParsedRecipeData(name='Toast'))
    assert breakdown.score == 15
    assert breakdown.details[0] == '✓ Has recipe name (+15)'
    assert '✗ Missing ingredients' in breakdown.details


def test_threshold_and_tiers():
    assert meets_quality_threshold(complete_recipe())
    assert not meets_quality_threshold(ParsedRecipeData(name='Toast'))
    assert get_quality_tier(80) == 'excellent'
    assert get_quality_tier(79) == 'good'
    assert get_quality_tier(40) == 'fair'
    assert get_quality_tier(39) == 'poor'
