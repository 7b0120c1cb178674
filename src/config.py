"""Application configuration using Pydantic BaseSettings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.constants import (
    DEFAULT_COMPLETION_MODEL,
    DEFAULT_PORT,
    DEFAULT_SYSTEM_PROMPT,
    DEFAULT_VERIFY_TOKEN,
    FACEBOOK_API_TIMEOUT_SECONDS,
    FACEBOOK_GRAPH_API_VERSION,
    FALLBACK_REPLY,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        # Load .env first, then .env.local (for local/test overrides)
        # Later files override earlier ones, so .env.local takes precedence
        env_file=[".env", ".env.local"],
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # OpenAI Configuration
    openai_api_key: str = Field(..., description="OpenAI API key (required)")
    completion_model: str = Field(
        default=DEFAULT_COMPLETION_MODEL,
        description="Chat-completion model used for replies",
    )
    system_prompt: str = Field(
        default=DEFAULT_SYSTEM_PROMPT,
        description="Static system instruction sent with every completion",
    )
    fallback_reply: str = Field(
        default=FALLBACK_REPLY,
        description="Reply text used when the completion call fails",
    )

    # Facebook Configuration
    facebook_page_access_token: str | None = Field(
        default=None,
        description="Facebook Page access token (replies are skipped when unset)",
    )
    facebook_verify_token: str = Field(
        default=DEFAULT_VERIFY_TOKEN, description="Webhook verification token"
    )
    facebook_app_secret: str | None = Field(
        default=None,
        description="Facebook App secret (optional, for signature verification)",
    )
    graph_api_version: str = Field(
        default=FACEBOOK_GRAPH_API_VERSION, description="Graph API version prefix"
    )
    facebook_api_timeout_seconds: float = Field(
        default=FACEBOOK_API_TIMEOUT_SECONDS,
        description="Timeout for Facebook Graph API calls (seconds)",
    )

    # Webhook handling
    dispatch_in_background: bool = Field(
        default=True,
        description="Acknowledge deliveries before running completions and replies",
    )

    # Server
    port: int = Field(default=DEFAULT_PORT, description="Listening port")

    # Environment
    env: Literal["local", "railway", "prod"] = Field(
        default="local", description="Current environment"
    )
    log_level: str = Field(default="INFO", description="Python logging level")

    # Sentry Configuration
    sentry_dsn: str | None = Field(
        default=None, description="Sentry DSN for error tracking (optional)"
    )
    sentry_traces_sample_rate: float = Field(
        default=1.0, description="Sentry traces sample rate (0.0 to 1.0)"
    )

    # Logfire Configuration
    logfire_token: str | None = Field(
        default=None, description="Pydantic Logfire token for observability"
    )

    @field_validator("openai_api_key")
    @classmethod
    def _require_api_key(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("OPENAI_API_KEY must not be empty")
        return value

    @field_validator("facebook_page_access_token", "facebook_app_secret")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        # An exported-but-empty variable counts as unset
        if value is not None and not value.strip():
            return None
        return value


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
