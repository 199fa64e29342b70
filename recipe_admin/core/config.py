"""Application configuration."""
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=Path.cwd() / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API
    app_name: str = "Recipe Pipeline Admin API"
    api_version: str = "1.0.0"
    debug: bool = False

    # Storage - DATABASE_URL wins over the SQLite path
    database_url: str = ""
    database_path: str = "database/recipes.db"

    # Parsing services
    openai_api_key: str = ""
    recipe_parser_model: str = "gpt-4o"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS - accepts comma-separated string from env
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    @property
    def cors_origins_list(self) -> list[str]:
        """Return CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Pagination
    default_page_size: int = 20
    max_page_size: int = 100


settings = Settings()
