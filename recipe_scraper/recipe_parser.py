"""
Clients for the external recipe parsing and nutrition estimation services.
Both are backed by an LLM chat completion in JSON mode.
"""

import json
from typing import List, Optional

from bs4 import BeautifulSoup

from .models import NutritionEstimate, ParsedIngredient

DEFAULT_MODEL = "gpt-4o"
MAX_PAGE_CHARS = 60000

RECIPE_SYSTEM_PROMPT = """You extract recipes from web pages.
Respond with a single JSON object using these keys (omit what the page does not state):
{
    "recipeName": string,
    "description": string,
    "imageUrl": string,
    "servings": integer,
    "prepTimeMinutes": integer,
    "cookTimeMinutes": integer,
    "cuisineType": string,
    "mealType": [string],
    "isVegetarian": boolean,
    "isVegan": boolean,
    "isDairyFree": boolean,
    "isGlutenFree": boolean,
    "containsNuts": boolean,
    "ingredients": [{"ingredientName": string, "quantity": number, "unit": string, "category": string, "notes": string}],
    "instructions": [{"stepNumber": integer, "instruction": string}],
    "caloriesPerServing": integer,
    "proteinPerServing": number,
    "carbsPerServing": number,
    "fatPerServing": number,
    "fiberPerServing": number,
    "sugarPerServing": number,
    "sodiumPerServing": integer
}
"notes" must hold the ingredient line exactly as written on the page.
If the page is not a recipe, respond with {}."""

NUTRITION_SYSTEM_PROMPT = """You estimate nutrition for recipes.
Given an ingredient list and a number of servings, respond with a JSON object:
{
    "caloriesPerServing": integer,
    "proteinPerServing": number,
    "carbsPerServing": number,
    "fatPerServing": number,
    "fiberPerServing": number,
    "sugarPerServing": number,
    "sodiumPerServing": integer
}
Grams for macros, milligrams for sodium."""


def extract_page_content(html: str, max_chars: int = MAX_PAGE_CHARS) -> str:
    """
    Reduce a page to its JSON-LD blocks and visible text.

    Args:
        html: Raw page HTML
        max_chars: Truncation limit for the returned text

    Returns:
        Text suitable for the parsing prompt
    """
    soup = BeautifulSoup(html, 'html.parser')

    structured = []
    for script in soup.find_all('script', type='application/ld+json'):
        if script.string:
            structured.append(script.string.strip())

    og_image = soup.find('meta', property='og:image')

    for tag in soup(['script', 'style', 'noscript', 'svg', 'nav', 'footer', 'header', 'form']):
        tag.decompose()

    text = soup.get_text(separator='\n', strip=True)

    parts = []
    if structured:
        parts.append("STRUCTURED DATA:\n" + "\n".join(structured))
    if og_image and og_image.get('content'):
        parts.append(f"IMAGE: {og_image['content']}")
    parts.append("PAGE TEXT:\n" + text)

    return "\n\n".join(parts)[:max_chars]


def _load_json_object(content: Optional[str]) -> Optional[dict]:
    if not content:
        return None
    data = json.loads(content)
    return data if isinstance(data, dict) else None


class RecipeParser:
    """Best-effort structured extraction of a recipe page."""

    def __init__(self, client, model: str = DEFAULT_MODEL):
        """
        Args:
            client: openai.OpenAI instance
            model: Chat model name
        """
        self.client = client
        self.model = model

    def parse(self, url: str, html: str) -> Optional[dict]:
        """
        Extract a raw recipe guess from a page.

        Returns:
            Recipe-shaped dict, or None when nothing was extracted
        """
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": RECIPE_SYSTEM_PROMPT},
                {"role": "user", "content": f"URL: {url}\n\n{extract_page_content(html)}"}
            ],
            response_format={"type": "json_object"},
            temperature=0
        )

        data = _load_json_object(response.choices[0].message.content)
        return data or None


class NutritionEstimator:
    """Fallback per-serving nutrition estimate from ingredients."""

    def __init__(self, client, model: str = DEFAULT_MODEL):
        self.client = client
        self.model = model

    def estimate(self, ingredients: List[ParsedIngredient], servings: int) -> NutritionEstimate:
        """
        Estimate per-serving macros.

        Raises:
            ValueError: If the service returned no usable calorie figure
        """
        lines = "\n".join(
            f"- {i.quantity:g} {i.unit} {i.name}".replace('  ', ' ') for i in ingredients
        )
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": NUTRITION_SYSTEM_PROMPT},
                {"role": "user", "content": f"Servings: {servings}\nIngredients:\n{lines}"}
            ],
            response_format={"type": "json_object"},
            temperature=0
        )

        data = _load_json_object(response.choices[0].message.content) or {}
        calories = data.get('caloriesPerServing')
        if not isinstance(calories, (int, float)) or calories <= 0:
            raise ValueError("Nutrition service returned no calorie estimate")

        def number(key):
            value = data.get(key)
            return float(value) if isinstance(value, (int, float)) else None

        sodium = number('sodiumPerServing')
        return NutritionEstimate(
            calories_per_serving=int(round(calories)),
            protein_per_serving=number('proteinPerServing'),
            carbs_per_serving=number('carbsPerServing'),
            fat_per_serving=number('fatPerServing'),
            fiber_per_serving=number('fiberPerServing'),
            sugar_per_serving=number('sugarPerServing'),
            sodium_per_serving=int(round(sodium)) if sodium is not None else None
        )
