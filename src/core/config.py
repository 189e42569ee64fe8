"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Profile Sync")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)

    # Local store
    database_url: str = Field(
        default="sqlite+aiosqlite:///./profiles.db",
        description="SQLAlchemy URL of the local profile store (async driver)",
    )

    # Remote profile endpoint
    remote_base_url: str = Field(
        default="https://randomuser.me/",
        description="Base URL of the random profile generator",
    )
    remote_timeout_seconds: float = Field(default=10.0, gt=0)

    # Sync policy
    default_batch_size: int = Field(
        default=10,
        ge=1,
        description="Batch size used when populating an empty store",
    )

    # Lookup codes
    lookup_code_size: int = Field(
        default=300,
        ge=64,
        description="Edge length in pixels of generated lookup codes",
    )

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(
        default="json",
        description="'json' for production, 'console' for development",
    )
    log_redact_pii: bool = Field(default=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_memory_database(self) -> bool:
        """True when the store lives in an in-memory SQLite database."""
        return self.database_url.startswith("sqlite") and ":memory:" in self.database_url


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

