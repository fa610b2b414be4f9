"""
Application configuration using Pydantic Settings.

Environment-based infrastructure switching is controlled by the ENVIRONMENT variable.
"""

from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===========================================
    # Environment
    # ===========================================
    ENVIRONMENT: Literal["local", "gcp", "test"] = "local"
    DEBUG: bool = True

    # ===========================================
    # Database
    # ===========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./statussheet.db"

    # ===========================================
    # LLM Configuration
    # ===========================================
    # LLM Provider: "litellm" | "gemini-api"
    # - litellm: LiteLLM (OpenAI, Bedrock, etc. with optional custom endpoint)
    # - gemini-api: Gemini API (API Key)
    LLM_PROVIDER: Literal["litellm", "gemini-api"] = "litellm"

    # LiteLLM model identifier (for litellm provider)
    LITELLM_MODEL: str = "openai/gpt-4o-mini"

    # LiteLLM custom endpoint (optional, for proxy servers)
    LITELLM_API_BASE: str = ""

    # LiteLLM custom API key (optional, for custom endpoints)
    LITELLM_API_KEY: str = ""

    # Gemini model name (for gemini-api)
    GEMINI_MODEL: str = "gemini-2.0-flash"

    # Google API Key (for gemini-api provider)
    GOOGLE_API_KEY: str = ""

    # Upper bound for a single content generation request
    AI_REQUEST_TIMEOUT_SECONDS: float = 30.0

    # Sampling temperature for generated narrative content
    AI_TEMPERATURE: float = 0.7

    # ===========================================
    # Auth (OIDC/JWT)
    # ===========================================
    AUTH_PROVIDER: Literal["mock", "oidc"] = "mock"
    OIDC_ISSUER: str = ""
    OIDC_AUDIENCE: str = ""
    OIDC_JWKS_URL: str = ""
    OIDC_EMAIL_CLAIM: str = "email"
    OIDC_NAME_CLAIM: str = "name"

    # E-mails allowed to run admin batch tools. Empty = everyone (local only).
    ADMIN_EMAILS: List[str] = Field(default_factory=list)

    # ===========================================
    # Server
    # ===========================================
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_ORIGINS: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"]
    )

    # Timezone used to decide what "today" is for health calculations
    APP_TIMEZONE: str = "UTC"

    # ===========================================
    # Health Calculation
    # ===========================================
    # Weight applied to milestones without a positive weight
    DEFAULT_MILESTONE_WEIGHT: int = 3

    # Completion points behind expected progress before yellow turns red
    HEALTH_BEHIND_SCHEDULE_MARGIN: int = 15

    # Milestones this many days ahead with high completion are flagged
    FAR_FUTURE_MILESTONE_DAYS: int = 30

    # ===========================================
    # Scheduler
    # ===========================================
    # Hour (APP_TIMEZONE) of the nightly duration/health recalculation
    RECALCULATION_HOUR: int = 2

    @property
    def is_gcp(self) -> bool:
        """Check if running in GCP environment."""
        return self.ENVIRONMENT == "gcp"

    @property
    def is_local(self) -> bool:
        """Check if running in local environment."""
        return self.ENVIRONMENT == "local"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are loaded only once.
    """
    return Settings()
