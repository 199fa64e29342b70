"""
Allergen detection from ingredient lists.

Matching is a plain lowercase substring test, so "gluten-free pasta"
still reports gluten.
"""

from typing import Dict, Iterable, List

from .models import ALLERGEN_CATEGORIES, ParsedIngredient

ALLERGEN_KEYWORDS: Dict[str, List[str]] = {
    'dairy': [
        'milk', 'cream', 'cheese', 'butter', 'yogurt', 'yoghurt', 'whey',
        'casein', 'lactose', 'ghee', 'curd', 'paneer', 'mozzarella',
        'cheddar', 'parmesan', 'feta', 'brie', 'camembert', 'ricotta',
        'mascarpone', 'crème fraîche', 'creme fraiche', 'sour cream',
        'half-and-half', 'half and half', 'buttermilk', 'custard',
    ],
    'gluten': [
        'wheat', 'flour', 'bread', 'pasta', 'barley', 'rye', 'oats',
        'semolina', 'couscous', 'bulgur', 'spelt', 'farro', 'durum',
        'breadcrumb', 'panko', 'noodles', 'spaghetti', 'penne', 'fusilli',
        'lasagne', 'lasagna', 'macaroni', 'tortilla', 'pita', 'naan',
        'croissant', 'baguette', 'ciabatta', 'focaccia', 'crouton',
        'seitan', 'vital wheat gluten',
    ],
    'nuts': [
        'almond', 'walnut', 'pecan', 'cashew', 'pistachio', 'hazelnut',
        'macadamia', 'brazil nut', 'chestnut', 'pine nut', 'pine nuts',
        'praline', 'marzipan', 'nougat', 'frangelico', 'amaretto',
    ],
    'peanuts': [
        'peanut', 'groundnut', 'arachis', 'monkey nut',
    ],
    'eggs': [
        'egg', 'eggs', 'mayonnaise', 'mayo', 'meringue', 'aioli',
        'hollandaise', 'béarnaise', 'bearnaise', 'custard', 'eggnog',
        'albumin', 'globulin', 'lecithin', 'lysozyme', 'ovalbumin',
        'ovomucin', 'ovomucoid', 'ovovitellin', 'vitellin',
    ],
    'shellfish': [
        'shrimp', 'prawn', 'crab', 'lobster', 'crayfish', 'crawfish',
        'scallop', 'mussel', 'clam', 'oyster', 'squid', 'calamari',
        'octopus', 'langoustine', 'cockle', 'periwinkle', 'whelk',
        'abalone', 'snail', 'escargot',
    ],
    'fish': [
        'salmon', 'tuna', 'cod', 'fish', 'anchovy', 'sardine', 'mackerel',
        'trout', 'haddock', 'halibut', 'herring', 'tilapia', 'bass',
        'snapper', 'swordfish', 'catfish', 'pollock', 'sole', 'flounder',
        'perch', 'pike', 'carp', 'eel', 'monkfish', 'turbot', 'bream',
        'fish sauce', 'worcestershire', 'caesar dressing',
    ],
    'soy': [
        'soy', 'soya', 'tofu', 'tempeh', 'edamame', 'miso', 'tamari',
        'soy sauce', 'soya sauce', 'soybean', 'soya bean',
        'textured vegetable protein', 'tvp', 'lecithin',
    ],
    'sesame': [
        'sesame', 'tahini', 'halva', 'halvah', 'hummus', 'houmous',
        'gomashio', 'sesame oil', 'sesame seed',
    ],
    'celery': [
        'celery', 'celeriac', 'celery salt', 'celery seed',
    ],
    'mustard': [
        'mustard', 'dijon', 'wholegrain mustard', 'mustard seed',
        'mustard powder', 'english mustard', 'french mustard',
    ],
    'sulphites': [
        'wine', 'dried fruit', 'vinegar', 'sulfite', 'sulphite',
        'sulfur dioxide', 'sulphur dioxide', 'metabisulfite', 'metabisulphite',
    ],
}

ALLERGEN_LABELS: Dict[str, str] = {
    'dairy': 'Contains dairy (milk products)',
    'gluten': 'Contains gluten (wheat/barley/rye)',
    'nuts': 'Contains tree nuts',
    'peanuts': 'Contains peanuts',
    'eggs': 'Contains eggs',
    'shellfish': 'Contains shellfish',
    'fish': 'Contains fish',
    'soy': 'Contains soy',
    'sesame': 'Contains sesame',
    'celery': 'Contains celery',
    'mustard': 'Contains mustard',
    'sulphites': 'May contain sulphites',
}


def _search_text(ingredient: ParsedIngredient) -> str:
    name = (ingredient.name or '').lower()
    original = (ingredient.original or '').lower()
    return f"{name} {original}"


def _matches(text: str, keywords: Iterable[str]) -> bool:
    return any(keyword in text for keyword in keywords)


def detect_allergens(ingredients: List[ParsedIngredient]) -> List[str]:
    """
    Detect allergen categories present in an ingredient list.

    Args:
        ingredients: Parsed ingredients

    Returns:
        Sorted list of allergen category names
    """
    detected = set()

    for ingredient in ingredients:
        text = _search_text(ingredient)
        for allergen, keywords in ALLERGEN_KEYWORDS.items():
            if allergen not in detected and _matches(text, keywords):
                detected.add(allergen)

    return sorted(detected)


def contains_allergen(ingredients: List[ParsedIngredient], allergen: str) -> bool:
    """Check a single allergen category without computing the full set."""
    keywords = ALLERGEN_KEYWORDS.get(allergen)
    if not keywords:
        return False

    return any(_matches(_search_text(ingredient), keywords) for ingredient in ingredients)


def get_allergen_warnings(ingredients: List[ParsedIngredient]) -> List[str]:
    """Human-readable warnings, in category order."""
    detected = set(detect_allergens(ingredients))
    return [ALLERGEN_LABELS[a] for a in ALLERGEN_CATEGORIES if a in detected]
