"""Tests for keyword allergen detection."""

from recipe_scraper.allergens import contains_allergen, detect_allergens, get_allergen_warnings
from recipe_scraper.models import ParsedIngredient


def ing(name, original=''):
    return ParsedIngredient(name=name, original=original)


def test_detects_categories_sorted():
    ingredients = [ing('butter'), ing('plain flour'), ing('large eggs'), ing('salmon fillet')]
    assert detect_allergens(ingredients) == ['dairy', 'eggs', 'fish', 'gluten']


def test_matches_original_text_as_well_as_name():
    ingredients = [ing('sauce', original='2 tbsp soy sauce')]
    assert detect_allergens(ingredients) == ['soy']


def test_no_allergens():
    assert detect_allergens([ing('chicken thighs'), ing('lemon'), ing('garlic')]) == []
    assert detect_allergens([]) == []


def test_case_insensitive():
    assert detect_allergens([ing('Parmesan')]) == ['dairy']


def test_no_negation_handling():
    """A "free-from" product still reports the keyword it mentions."""
    assert 'gluten' in detect_allergens([ing('gluten-free pasta')])


def test_adding_ingredients_never_removes_allergens():
    base = [ing('tahini'), ing('lemon')]
    before = set(detect_allergens(base))
    after = set(detect_allergens(base + [ing('water'), ing('walnuts')]))
    assert before <= after
    assert 'nuts' in after


def test_contains_allergen():
    ingredients = [ing('dijon mustard'), ing('olive oil')]
    assert contains_allergen(ingredients, 'mustard')
    assert not contains_allergen(ingredients, 'dairy')
    assert not contains_allergen(ingredients, 'not-a-category')


def test_warnings_follow_category_order():
    warnings = get_allergen_warnings([ing('sesame seeds'), ing('milk')])
    assert warnings == ['Contains dairy (milk products)', 'Contains sesame']
