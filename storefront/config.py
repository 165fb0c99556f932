"""Application configuration using Pydantic Settings.

Reads configuration from environment variables with sensible defaults.
Secrets (token secret, admin password hash, database password) should be
provided via environment variables.
"""

from functools import lru_cache
from pathlib import Path
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
    store_name: str = Field(
        default="Luxury Selet",
        description="Store name used in order messages",
    )
    frontend_url: str = Field(
        default="http://localhost:5176",
        description="Storefront origin allowed by CORS",
    )

    # =========================================================================
    # Remote Table Store (PostgreSQL)
    # =========================================================================
    db_user: str = Field(
        default="storefront",
        description="Database user",
    )
    db_password: str = Field(
        default="",
        description="Database password",
    )
    db_name: str = Field(
        default="storefront",
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

    @computed_field  # type: ignore[prop-decorator]
    @property
    def database_url(self) -> str:
        """Build the asyncpg database URL."""
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    # =========================================================================
    # Backend Aggregation Service (client side)
    # =========================================================================
    backend_url: str = Field(
        default="http://localhost:3001",
        description="Backend aggregation service URL",
    )
    backend_timeout: float = Field(
        default=10.0,
        description="Backend request timeout in seconds",
    )

    # =========================================================================
    # Local Cache Store
    # =========================================================================
    local_storage_root: str = Field(
        default="./local_storage",
        description="Directory holding the local cache entries",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def local_storage_path(self) -> Path:
        """Local cache directory as a Path."""
        return Path(self.local_storage_root)

    # =========================================================================
    # Admin authentication
    # =========================================================================
    token_secret: str = Field(
        default="",
        description="Secret used to sign admin bearer tokens",
    )
    token_ttl_seconds: int = Field(
        default=24 * 60 * 60,
        gt=0,
        description="Bearer token lifetime in seconds",
    )
    admin_username: str = Field(
        default="admin",
        description="Admin username",
    )
    admin_name: str = Field(
        default="Administrador",
        description="Admin display name",
    )
    admin_password_hash: str = Field(
        default="",
        description="bcrypt hash of the admin password",
    )
    login_rate_limit_attempts: int = Field(
        default=5,
        gt=0,
        description="Login attempts allowed per client per window",
    )
    login_rate_limit_window_seconds: float = Field(
        default=15 * 60,
        gt=0,
        description="Login rate limit window in seconds",
    )

    # =========================================================================
    # Checkout
    # =========================================================================
    whatsapp_number: str = Field(
        default="351961281939",
        description="WhatsApp number receiving order messages (digits only)",
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
