"""
Configured recipe source sites and an idempotent seeder for them.
Re-running the seeder updates existing sites by name.
"""

from typing import Dict, List

from sqlalchemy.exc import SQLAlchemyError

SOURCE_SITES: List[Dict] = [
    {
        'name': 'bbcgoodfood',
        'display_name': 'BBC Good Food',
        'base_url': 'https://www.bbcgoodfood.com',
        'search_url_pattern': '/search?q={query}&page={page}',
        'search_results_selector': 'a.standard-card-new__article-title',
        'categories': [
            'chicken', 'beef', 'pork', 'lamb', 'fish', 'seafood', 'salmon',
            'vegetarian', 'vegan', 'pasta', 'rice', 'curry', 'stir-fry',
            'soup', 'salad', 'breakfast', 'lunch', 'dinner', 'quick',
            'healthy', 'low-calorie', 'high-protein', 'family', 'budget'
        ],
        'is_active': True
    },
    {
        'name': 'allrecipes',
        'display_name': 'AllRecipes',
        'base_url': 'https://www.allrecipes.com',
        'search_url_pattern': '/search?q={query}&page={page}',
        'search_results_selector': 'a.mntl-card-list-card',
        'categories': [
            'chicken', 'beef', 'pork', 'fish', 'vegetarian', 'vegan',
            'pasta', 'casserole', 'soup', 'salad', 'breakfast', 'dinner',
            'quick-and-easy', 'healthy', 'low-carb'
        ],
        'is_active': True
    },
    {
        'name': 'delicious',
        'display_name': 'Delicious Magazine',
        'base_url': 'https://www.deliciousmagazine.co.uk',
        'search_url_pattern': '/search?q={query}',
        'search_results_selector': 'a.recipe-card',
        'categories': [
            'chicken', 'beef', 'fish', 'vegetarian', 'pasta', 'curry',
            'roast', 'salad', 'soup', 'quick', 'weekend'
        ],
        'is_active': True
    },
    {
        'name': 'taste',
        'display_name': 'Taste.com.au',
        'base_url': 'https://www.taste.com.au',
        'search_url_pattern': '/search-recipes?q={query}&page={page}',
        'search_results_selector': 'a.recipe-card-link',
        'categories': [
            'chicken', 'beef', 'lamb', 'fish', 'vegetarian', 'pasta',
            'asian', 'indian', 'healthy', 'quick', 'family'
        ],
        'is_active': True
    },
    {
        'name': 'olivemagazine',
        'display_name': 'Olive Magazine',
        'base_url': 'https://www.olivemagazine.com',
        'search_url_pattern': '/search?q={query}',
        'search_results_selector': 'a.post-card',
        'categories': [
            'chicken', 'beef', 'fish', 'vegetarian', 'vegan', 'pasta',
            'mediterranean', 'asian', 'healthy', 'quick'
        ],
        'is_active': True
    },
]


def seed_source_sites(storage, sites: List[Dict] = None) -> int:
    """
    Upsert source sites by name.

    Args:
        storage: DatabaseStorage instance
        sites: Site definitions, defaults to SOURCE_SITES

    Returns:
        Number of sites seeded successfully
    """
    sites = SOURCE_SITES if sites is None else sites
    print("Seeding recipe source sites...")

    seeded = 0
    for site in sites:
        try:
            storage.upsert_site(site)
            seeded += 1
            print(f"  ✓ {site['display_name']} ({len(site['categories'])} categories)")
        except (SQLAlchemyError, ValueError) as e:
            print(f"  ✗ Failed to seed {site.get('display_name', site.get('name'))}: {e}")

    print(f"\n✓ Seeded {seeded}/{len(sites)} sites")
    print(f"   Total sites: {len(storage.list_sites())}")
    print(f"   Total categories: {sum(len(s['categories']) for s in sites)}")
    return seeded
