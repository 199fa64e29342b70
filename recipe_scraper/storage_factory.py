"""
Factories that build the pipeline's storage and service clients from the environment.
"""

import os

from .config import ScraperConfig


def create_storage(connection_string: str = None, database_path: str = None):
    """
    Create database storage.

    Uses DATABASE_URL when set, otherwise an SQLite file at DATABASE_PATH
    (default database/recipes.db).

    Returns:
        DatabaseStorage instance
    """
    from .database_storage import DatabaseStorage

    connection_string = connection_string or os.getenv('DATABASE_URL') or None
    database_path = database_path or os.getenv('DATABASE_PATH', 'database/recipes.db')

    if connection_string:
        print("Using database storage (DATABASE_URL)")
    else:
        print(f"Using SQLite storage at {database_path}")
    return DatabaseStorage(connection_string=connection_string, database_path=database_path)


def create_parsing_services(api_key: str = None, model: str = None):
    """
    Create the recipe parser and nutrition estimator.

    Returns:
        Tuple of (RecipeParser, NutritionEstimator)

    Raises:
        ValueError: If OPENAI_API_KEY is not set
    """
    from openai import OpenAI
    from .recipe_parser import DEFAULT_MODEL, NutritionEstimator, RecipeParser

    api_key = api_key or os.getenv('OPENAI_API_KEY')
    model = model or os.getenv('RECIPE_PARSER_MODEL', DEFAULT_MODEL)

    if not api_key:
        raise ValueError(
            "OPENAI_API_KEY environment variable must be set. "
            "Check your .env file."
        )

    client = OpenAI(api_key=api_key, timeout=float(os.getenv('RECIPE_PARSER_TIMEOUT', '90')))
    return RecipeParser(client, model=model), NutritionEstimator(client, model=model)


def create_job_runner(storage=None, config: ScraperConfig = None, api_key: str = None, model: str = None):
    """
    Wire a JobRunner with live HTTP fetching and parsing services.

    Args:
        storage: Existing DatabaseStorage, created from the environment if None
        config: ScraperConfig instance, uses defaults if None
        api_key: OpenAI API key, read from OPENAI_API_KEY if None
        model: Parser model, read from RECIPE_PARSER_MODEL if None

    Returns:
        JobRunner instance
    """
    from .job_runner import JobRunner
    from .page_fetcher import PageFetcher
    from .recipe_importer import RecipeImporter
    from .resilience.content_discovery import ContentDiscovery
    from .resilience.retry_handler import RetryHandler

    config = config or ScraperConfig()
    storage = storage or create_storage()
    fetcher = PageFetcher(config.http)
    parser, nutrition = create_parsing_services(api_key=api_key, model=model)

    discovery = ContentDiscovery(fetcher, RetryHandler(config.retry))
    importer = RecipeImporter(
        storage=storage,
        fetcher=fetcher,
        parser=parser,
        nutrition_estimator=nutrition,
        config=config
    )
    return JobRunner(storage, discovery, importer, config=config)
