"""
Validation and normalization of the parsing service's raw recipe guess.

The parser returns loosely shaped JSON. RawRecipe accepts whatever subset of
fields came back (camelCase or snake_case) and normalize_recipe() converts it
into the canonical ParsedRecipeData in one step.
"""

import re
from typing import Any, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .models import ParsedIngredient, ParsedInstruction, ParsedRecipeData

_FRACTION = re.compile(r'^\s*(\d+)\s*/\s*(\d+)\s*$')
_MIXED = re.compile(r'^\s*(\d+)\s+(\d+)\s*/\s*(\d+)\s*$')
_LEADING_NUMBER = re.compile(r'^\s*(\d+(?:\.\d+)?)')


def _to_number(value: Any) -> Optional[float]:
    """Best-effort numeric coercion ("1 1/2", "3/4", "20 mins", 2)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        return None

    match = _MIXED.match(value)
    if match:
        whole, num, den = (int(g) for g in match.groups())
        return whole + num / den if den else None
    match = _FRACTION.match(value)
    if match:
        num, den = (int(g) for g in match.groups())
        return num / den if den else None
    match = _LEADING_NUMBER.match(value)
    if match:
        return float(match.group(1))
    return None


class _Raw(BaseModel):
    model_config = ConfigDict(extra='ignore', populate_by_name=True)


class RawIngredient(_Raw):
    ingredient_name: Optional[str] = Field(None, validation_alias=AliasChoices('ingredientName', 'ingredient_name'))
    name: Optional[str] = None
    quantity: Optional[float] = None
    unit: Optional[str] = None
    category: Optional[str] = None
    notes: Optional[str] = Field(None, validation_alias=AliasChoices('notes', 'original'))

    @field_validator('quantity', mode='before')
    @classmethod
    def _coerce_quantity(cls, value):
        return _to_number(value)

    @field_validator('unit', 'category', 'notes', 'name', 'ingredient_name', mode='before')
    @classmethod
    def _coerce_text(cls, value):
        if value is None:
            return None
        return str(value).strip()


class RawInstruction(_Raw):
    step_number: Optional[int] = Field(None, validation_alias=AliasChoices('stepNumber', 'step_number', 'step'))
    instruction: Optional[str] = Field(None, validation_alias=AliasChoices('instruction', 'text'))

    @field_validator('step_number', mode='before')
    @classmethod
    def _coerce_step(cls, value):
        number = _to_number(value)
        return int(number) if number is not None else None


class RawRecipe(_Raw):
    """Partial recipe as returned by the parsing service."""
    recipe_name: Optional[str] = Field(None, validation_alias=AliasChoices('recipeName', 'recipe_name'))
    name: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, validation_alias=AliasChoices('imageUrl', 'image_url', 'image'))
    servings: Optional[int] = None
    prep_time_minutes: Optional[int] = Field(None, validation_alias=AliasChoices('prepTimeMinutes', 'prep_time_minutes'))
    cook_time_minutes: Optional[int] = Field(None, validation_alias=AliasChoices('cookTimeMinutes', 'cook_time_minutes'))
    cuisine_type: Optional[str] = Field(None, validation_alias=AliasChoices('cuisineType', 'cuisine_type'))
    meal_type: Union[List[str], str, None] = Field(None, validation_alias=AliasChoices('mealType', 'meal_type', 'mealCategory'))

    is_vegetarian: Optional[bool] = Field(None, validation_alias=AliasChoices('isVegetarian', 'is_vegetarian'))
    is_vegan: Optional[bool] = Field(None, validation_alias=AliasChoices('isVegan', 'is_vegan'))
    is_dairy_free: Optional[bool] = Field(None, validation_alias=AliasChoices('isDairyFree', 'is_dairy_free'))
    is_gluten_free: Optional[bool] = Field(None, validation_alias=AliasChoices('isGlutenFree', 'is_gluten_free'))
    contains_nuts: Optional[bool] = Field(None, validation_alias=AliasChoices('containsNuts', 'contains_nuts'))

    ingredients: List[RawIngredient] = Field(default_factory=list)
    instructions: List[RawInstruction] = Field(default_factory=list)

    calories_per_serving: Optional[int] = Field(None, validation_alias=AliasChoices('caloriesPerServing', 'calories_per_serving'))
    protein_per_serving: Optional[float] = Field(None, validation_alias=AliasChoices('proteinPerServing', 'protein_per_serving'))
    carbs_per_serving: Optional[float] = Field(None, validation_alias=AliasChoices('carbsPerServing', 'carbs_per_serving'))
    fat_per_serving: Optional[float] = Field(None, validation_alias=AliasChoices('fatPerServing', 'fat_per_serving'))
    fiber_per_serving: Optional[float] = Field(None, validation_alias=AliasChoices('fiberPerServing', 'fiber_per_serving'))
    sugar_per_serving: Optional[float] = Field(None, validation_alias=AliasChoices('sugarPerServing', 'sugar_per_serving'))
    sodium_per_serving: Optional[int] = Field(None, validation_alias=AliasChoices('sodiumPerServing', 'sodium_per_serving'))
    nutrition_source: Optional[str] = Field(None, validation_alias=AliasChoices('nutritionSource', 'nutrition_source'))

    @field_validator(
        'servings', 'prep_time_minutes', 'cook_time_minutes',
        'calories_per_serving', 'sodium_per_serving', mode='before'
    )
    @classmethod
    def _coerce_int(cls, value):
        number = _to_number(value)
        return int(round(number)) if number is not None else None

    @field_validator(
        'protein_per_serving', 'carbs_per_serving', 'fat_per_serving',
        'fiber_per_serving', 'sugar_per_serving', mode='before'
    )
    @classmethod
    def _coerce_float(cls, value):
        return _to_number(value)

    @field_validator(
        'is_vegetarian', 'is_vegan', 'is_dairy_free', 'is_gluten_free', 'contains_nuts',
        mode='before'
    )
    @classmethod
    def _coerce_flag(cls, value):
        if isinstance(value, bool) or value is None:
            return value
        text = str(value).strip().lower()
        if text in ('true', 'yes', '1'):
            return True
        if text in ('false', 'no', '0'):
            return False
        return None

    @field_validator('image_url', mode='before')
    @classmethod
    def _coerce_image(cls, value):
        # JSON-LD images may be a list of URLs or ImageObject dicts
        if isinstance(value, list):
            value = value[0] if value else None
        if isinstance(value, dict):
            value = value.get('url')
        return value if isinstance(value, str) else None

    @field_validator('recipe_name', 'name', 'description', 'cuisine_type', 'nutrition_source', mode='before')
    @classmethod
    def _coerce_text(cls, value):
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, list):
            return ', '.join(str(v) for v in value if v)
        return str(value)

    @field_validator('ingredients', mode='before')
    @classmethod
    def _coerce_ingredients(cls, value):
        if not value:
            return []
        if not isinstance(value, list):
            value = [value]
        return [{'name': item, 'notes': item} if isinstance(item, str) else item for item in value]

    @field_validator('instructions', mode='before')
    @classmethod
    def _coerce_instructions(cls, value):
        if not value:
            return []
        if not isinstance(value, list):
            value = [value]
        return [{'instruction': item} if isinstance(item, str) else item for item in value]


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _normalize_ingredient(raw: RawIngredient) -> Optional[ParsedIngredient]:
    name = raw.ingredient_name or raw.name or ''
    if not name:
        return None

    quantity = raw.quantity or 0
    unit = raw.unit or ''
    original = raw.notes or ' '.join(p for p in (_format_number(quantity), unit, name) if p)

    return ParsedIngredient(
        name=name,
        quantity=quantity,
        unit=unit,
        original=original,
        category=raw.category or None
    )


def _meal_categories(meal_type) -> List[str]:
    if not meal_type:
        return []
    if isinstance(meal_type, str):
        meal_type = [meal_type]
    return [t.strip().lower() for t in meal_type if t and t.strip()]


def _dietary_tags(raw: RawRecipe) -> List[str]:
    tags = []
    if raw.is_vegetarian:
        tags.append('vegetarian')
    if raw.is_vegan:
        tags.append('vegan')
    if raw.is_dairy_free:
        tags.append('dairy-free')
    if raw.is_gluten_free:
        tags.append('gluten-free')
    if raw.contains_nuts is False:
        tags.append('nut-free')
    return tags


def parse_raw_recipe(payload: Any) -> Optional[RawRecipe]:
    """
    Validate the parser payload.

    Returns:
        RawRecipe, or None if the payload is empty or not an object

    Raises:
        pydantic.ValidationError: If fields are present but unusable
    """
    if not payload or not isinstance(payload, dict):
        return None
    return RawRecipe.model_validate(payload)


def normalize_recipe(raw: RawRecipe, default_servings: int = 4) -> ParsedRecipeData:
    """Convert a validated raw recipe into the canonical shape."""
    ingredients = [i for i in (_normalize_ingredient(r) for r in raw.ingredients) if i]

    instructions = []
    for idx, step in enumerate(raw.instructions):
        text = (step.instruction or '').strip()
        if text:
            instructions.append(ParsedInstruction(step_number=step.step_number or idx + 1, instruction=text))

    return ParsedRecipeData(
        name=(raw.recipe_name or raw.name or '').strip(),
        description=raw.description or None,
        image_url=raw.image_url or None,
        servings=raw.servings or default_servings,
        prep_time_minutes=raw.prep_time_minutes or None,
        cook_time_minutes=raw.cook_time_minutes or None,
        cuisine_type=raw.cuisine_type or None,
        meal_category=_meal_categories(raw.meal_type),
        dietary_tags=_dietary_tags(raw),
        ingredients=ingredients,
        instructions=instructions,
        calories_per_serving=raw.calories_per_serving,
        protein_per_serving=raw.protein_per_serving,
        carbs_per_serving=raw.carbs_per_serving,
        fat_per_serving=raw.fat_per_serving,
        fiber_per_serving=raw.fiber_per_serving,
        sugar_per_serving=raw.sugar_per_serving,
        sodium_per_serving=raw.sodium_per_serving,
        nutrition_source=raw.nutrition_source
    )
