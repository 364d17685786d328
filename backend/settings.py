"""
Centralized settings configuration using Pydantic BaseSettings.

All environment variables are defined here with types, defaults, and validation.
Use get_settings() to share one cached instance across the process.

Usage:
    from backend.settings import get_settings, Settings

    settings = get_settings()
    print(settings.supabase_url)

    # Tests: explicit values, no .env file
    settings = Settings(environment="test", _env_file=None)
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Core Environment
    # -------------------------------------------------------------------------
    environment: str = Field(
        default="development",
        description="Runtime environment: development, staging, production, test",
    )

    # -------------------------------------------------------------------------
    # Supabase Database
    # -------------------------------------------------------------------------
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL",
    )
    supabase_service_role_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key (full access)",
    )
    supabase_anon_key: Optional[str] = Field(
        default=None,
        description="Supabase anonymous key (limited access)",
    )
    supabase_user_id: Optional[str] = Field(
        default=None,
        description="Owner of the menu, body and calorie rows this process reads and writes",
    )

    @property
    def supabase_key(self) -> Optional[str]:
        """Get the best available Supabase key (service role preferred)."""
        return self.supabase_service_role_key or self.supabase_anon_key

    # -------------------------------------------------------------------------
    # External Services - OpenAI (calorie estimation)
    # -------------------------------------------------------------------------
    openai_api_key: Optional[str] = Field(
        default=None,
        description="OpenAI API key; AI calorie estimation is skipped when unset",
    )
    calorie_estimation_model: str = Field(
        default="gpt-4o-mini",
        description="Chat model used for calorie estimation",
    )
    calorie_estimation_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout for one estimation request",
    )

    # -------------------------------------------------------------------------
    # External Services - Helicone (AI observability proxy)
    # -------------------------------------------------------------------------
    helicone_enabled: bool = Field(
        default=False,
        description="Route OpenAI calls through the Helicone proxy",
    )
    helicone_api_key: Optional[str] = Field(
        default=None,
        description="Helicone API key",
    )

    # -------------------------------------------------------------------------
    # Training defaults
    # -------------------------------------------------------------------------
    default_body_weight_kg: float = Field(
        default=70.0,
        gt=0,
        description="Body weight assumed when no body record exists",
    )

    # -------------------------------------------------------------------------
    # Observability - Sentry
    # -------------------------------------------------------------------------
    sentry_dsn: Optional[str] = Field(
        default=None,
        description="Sentry DSN for error tracking",
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is a valid value."""
        valid_environments = {"development", "staging", "production", "test"}
        if v.lower() not in valid_environments:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {valid_environments}"
            )
        return v.lower()

    # -------------------------------------------------------------------------
    # Helper Properties
    # -------------------------------------------------------------------------
    @property
    def ai_estimation_configured(self) -> bool:
        """True when an OpenAI key is available."""
        return bool(self.openai_api_key)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    For testing, you can clear the cache with get_settings.cache_clear().

    Returns:
        Settings: Application settings instance
    """
    return Settings()
