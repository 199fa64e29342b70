"""
Data quality score for scraped recipes.
Score 0-100 based on completeness.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Tuple

from .models import ParsedRecipeData

MIN_INGREDIENTS = 3
MIN_INSTRUCTIONS = 2


@dataclass
class QualityBreakdown:
    score: int
    max_score: int = 100
    details: List[str] = field(default_factory=list)


# (points, label, check) - every check only looks for presence, so filling
# in more fields can never lower the score.
QUALITY_RULES: List[Tuple[int, str, Callable[[ParsedRecipeData], bool]]] = [
    (15, 'recipe name', lambda r: bool(r.name and r.name.strip())),
    (15, 'ingredients', lambda r: len(r.ingredients or []) > 0),
    (5, f'{MIN_INGREDIENTS}+ ingredients', lambda r: len(r.ingredients or []) >= MIN_INGREDIENTS),
    (10, 'instructions', lambda r: len(r.instructions or []) > 0),
    (5, f'{MIN_INSTRUCTIONS}+ instructions', lambda r: len(r.instructions or []) >= MIN_INSTRUCTIONS),
    (10, 'image', lambda r: bool(r.image_url and r.image_url.startswith('http'))),
    (5, 'servings', lambda r: bool(r.servings and r.servings > 0)),
    (5, 'cooking times', lambda r: bool(r.prep_time_minutes or r.cook_time_minutes)),
    (10, 'calorie info', lambda r: bool(r.calories_per_serving and r.calories_per_serving > 0)),
    (5, 'protein info', lambda r: bool(r.protein_per_serving and r.protein_per_serving > 0)),
    (5, 'cuisine type', lambda r: bool(r.cuisine_type)),
    (5, 'meal category', lambda r: len(r.meal_category or []) > 0),
    (5, 'description', lambda r: bool(r.description and len(r.description) > 20)),
]


def calculate_quality_score(recipe: ParsedRecipeData) -> int:
    """
    Calculate quality score for a parsed recipe.

    Returns:
        Score from 0-100
    """
    score = sum(points for points, _, check in QUALITY_RULES if check(recipe))
    return min(100, score)


def get_quality_breakdown(recipe: ParsedRecipeData) -> QualityBreakdown:
    """Score plus a line per rule explaining what was awarded."""
    details = []
    score = 0

    for points, label, check in QUALITY_RULES:
        if check(recipe):
            score += points
            details.append(f"✓ Has {label} (+{points})")
        else:
            details.append(f"✗ Missing {label}")

    return QualityBreakdown(score=min(100, score), details=details)


def meets_quality_threshold(recipe: ParsedRecipeData, threshold: int = 50) -> bool:
    return calculate_quality_score(recipe) >= threshold


def get_quality_tier(score: int) -> str:
    """Map a score to excellent / good / fair / poor."""
    if score >= 80:
        return 'excellent'
    if score >= 60:
        return 'good'
    if score >= 40:
        return 'fair'
    return 'poor'
