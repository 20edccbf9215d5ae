"""Application configuration using Pydantic Settings.

Reads configuration from environment variables with sensible defaults.
Secrets (database password) should only ever come from the environment.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Application
    # =========================================================================
    environment: Literal["prod", "staging", "dev"] = Field(
        default="dev",
        description="Environment name",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # =========================================================================
    # Database
    # =========================================================================
    db_user: str = Field(
        default="catalog_admin",
        description="Database user",
    )
    db_password: str = Field(
        default="",
        description="Database password",
    )
    db_name: str = Field(
        default="catalog",
        description="Database name",
    )
    db_host: str = Field(
        default="localhost",
        description="Database host",
    )
    db_port: int = Field(
        default=5432,
        description="Database port",
    )
    db_pool_size: int = Field(
        default=5,
        description="Database connection pool size",
    )
    db_pool_max_overflow: int = Field(
        default=10,
        description="Max overflow connections beyond pool size",
    )
    db_url: str = Field(
        default="",
        description="Full SQLAlchemy URL, overrides the db_* fields when set",
    )
    db_create_tables: bool = Field(
        default=False,
        description="Create missing tables on startup",
    )
    use_memory_store: bool = Field(
        default=False,
        description="Keep categories in process memory instead of the database",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def database_url(self) -> str:
        """Build the async database URL.

        An explicit db_url wins (e.g. sqlite+aiosqlite for local work),
        otherwise a PostgreSQL asyncpg URL is assembled.
        """
        if self.db_url:
            return self.db_url
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    # =========================================================================
    # Category listing
    # =========================================================================
    stats_top_n: int = Field(
        default=10,
        ge=0,
        description="Number of categories reported in top_categories",
    )
    default_page_size: int = Field(
        default=20,
        ge=1,
        description="Default page size for category lists",
    )
    max_page_size: int = Field(
        default=100,
        ge=1,
        description="Largest page size a client may request",
    )

    # =========================================================================
    # Logging
    # =========================================================================
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_json: bool = Field(
        default=True,
        description="Output logs as JSON",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Singleton instance for convenience
settings = get_settings()
