"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, RedisDsn, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Minimum entropy for secrets (measured by character diversity)
MIN_SECRET_UNIQUE_CHARS = 16


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Food Finance API"
    debug: bool = False
    environment: Literal["development", "staging", "production", "test"] = "development"

    # Database (required - no default for security)
    database_url: str = Field(
        description="Database connection URL. Must be set via environment variable."
    )
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Redis
    redis_url: RedisDsn | None = Field(default="redis://localhost:6379")

    # Security - JWT issued by the session provider
    jwt_secret: str = Field(min_length=32)
    jwt_algorithm: str = "HS256"
    jwt_expiration_hours: int = 12
    jwt_issuer: str = "food-finance"

    # CORS settings
    cors_origins: str = "http://localhost:3000"  # Comma-separated list

    # Rate limiting settings
    rate_limit_enabled: bool = True
    rate_limit_default: int = 100
    rate_limit_backup_export: str = "10/minute"
    rate_limit_backup_import: str = "3/minute"

    # Backup settings
    backup_max_upload_mb: int = 25

    # Cache TTL settings (in seconds)
    cache_ttl_lists: int = 300  # 5 minutes
    cache_ttl_dashboard: int = 300  # 5 minutes
    cache_ttl_backup_summary: int = 600  # 10 minutes
    cache_ttl_store: int = 3600  # 1 hour

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Validate settings for security requirements."""
        if self.environment == "production" and self.debug:
            raise ValueError(
                "DEBUG mode cannot be enabled in production environment. "
                "This would expose API documentation and detailed error messages."
            )

        url = self.database_url
        if self.environment == "production":
            if not url.startswith(("postgresql://", "postgres://", "postgresql+asyncpg://")):
                raise ValueError(
                    "DATABASE_URL must be a PostgreSQL URL in production"
                )
            if len(set(self.jwt_secret)) < MIN_SECRET_UNIQUE_CHARS:
                raise ValueError(
                    f"JWT_SECRET must contain at least {MIN_SECRET_UNIQUE_CHARS} unique characters "
                    "for sufficient entropy. Use a cryptographically random value."
                )

        return self

    @property
    def async_database_url(self) -> str:
        """Get async database URL for SQLAlchemy.

        PostgreSQL URLs are rewritten to use asyncpg, converting the sslmode
        parameter to ssl for asyncpg compatibility. URLs that already name an
        async driver are returned unchanged.
        """
        url = self.database_url
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql://", 1)
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
            url = url.replace("sslmode=", "ssl=")
        return url

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def backup_max_upload_bytes(self) -> int:
        """Maximum accepted backup upload size in bytes."""
        return self.backup_max_upload_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
