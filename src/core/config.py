"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(RuntimeError):
    """Required configuration is missing."""


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Player Profiles API")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Database (Supabase Postgres)
    database_url: str = Field(
        default="",
        description="PostgreSQL connection URL, credentials included",
    )

    # Clerk
    clerk_secret_key: str = Field(
        default="",
        description="Clerk secret key for the backend API (server-side only, keep secret)",
    )
    clerk_webhook_signing_secret: str = Field(
        default="",
        description="Svix signing secret of the Clerk webhook endpoint (whsec_...)",
    )
    clerk_issuer: str = Field(
        default="",
        description="Clerk Frontend API URL, the `iss` claim of session tokens",
    )
    clerk_api_url: str = Field(default="https://api.clerk.com/v1")

    # JWT Authentication
    jwt_secret_key: str = Field(
        default="",
        description=(
            "Secret key for HS256 tokens (local development and tests). "
            "HS256 tokens are rejected when empty or in production"
        ),
    )
    jwt_algorithm: str = Field(default="HS256")
    jwt_expire_minutes: int = Field(default=30)

    # Profiles
    profile_ensure_strategy: Literal["hinted", "deterministic"] = Field(
        default="hinted",
        description="Policy used by POST /profile/ensure",
    )
    empty_rank_policy: Literal["default", "reject"] = Field(
        default="default",
        description=(
            "'default' stores an empty current_rank as 'Unranked', "
            "'reject' refuses it"
        ),
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def async_database_url(self) -> str:
        """Ensure the database URL uses the asyncpg driver scheme.

        Supabase supplies a standard ``postgresql://`` URL.
        SQLAlchemy's async engine requires ``postgresql+asyncpg://``.
        """
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    # Rate Limiting
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable/disable rate limiting (disable for tests)",
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed origins",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def missing_required(self) -> list[str]:
        """Names of required settings that are empty."""
        required = {
            "DATABASE_URL": self.database_url,
            "CLERK_SECRET_KEY": self.clerk_secret_key,
            "CLERK_WEBHOOK_SIGNING_SECRET": self.clerk_webhook_signing_secret,
        }
        return [name for name, value in required.items() if not value]

    def check_required(self) -> None:
        """Raise ConfigurationError if any required setting is missing."""
        missing = self.missing_required()
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}"
            )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
