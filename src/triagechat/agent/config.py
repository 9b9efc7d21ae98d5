"""Configuration management using pydantic-settings.

Key patterns:
1. Multiple env files (.env, .env.local) - local overrides shared
2. API keys are optional here; missing keys fall through to ~/.netrc
3. validation_alias for explicit env var names
4. Singleton instance for easy import

Usage:
    from triagechat.agent.config import settings
    print(settings.backend)
"""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Provider API keys use the standard names (GEMINI_API_KEY,
    ANTHROPIC_API_KEY) so the same environment works for the SDKs.

    Everything else uses the TRIAGE_ prefix.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        extra="ignore",
    )

    # ==========================================================================
    # BACKEND
    # ==========================================================================

    backend: str = Field(
        default="gemini",
        validation_alias="TRIAGE_BACKEND",
        description="Model backend to talk to ('gemini' or 'claude')",
    )

    model: str | None = Field(
        default=None,
        validation_alias="TRIAGE_MODEL",
        description="Model name (None = backend default)",
    )

    backend_max_attempts: int = Field(
        default=3,
        ge=1,
        validation_alias="TRIAGE_BACKEND_MAX_ATTEMPTS",
        description="Attempts per backend call on transient HTTP failures",
    )

    http_timeout_seconds: float | None = Field(
        default=None,
        validation_alias="TRIAGE_HTTP_TIMEOUT_SECONDS",
        description="Timeout for backend HTTP requests (None = wait forever)",
    )

    # ==========================================================================
    # CREDENTIALS
    # ==========================================================================

    gemini_api_key: str | None = Field(
        default=None,
        validation_alias="GEMINI_API_KEY",
        description="Gemini API key (falls back to ~/.netrc machine ai.google.dev)",
    )

    anthropic_api_key: str | None = Field(
        default=None,
        validation_alias="ANTHROPIC_API_KEY",
        description="Anthropic API key (falls back to ~/.netrc machine api.anthropic.com)",
    )

    netrc_path: str | None = Field(
        default=None,
        validation_alias="TRIAGE_NETRC",
        description="Path to the netrc file (None = ~/.netrc)",
    )

    # ==========================================================================
    # LOGGING
    # ==========================================================================

    log_level: str = Field(
        default="WARNING",
        validation_alias="TRIAGE_LOG_LEVEL",
        description="Log level for diagnostics written to stderr",
    )

    @field_validator("backend", mode="after")
    @classmethod
    def _lower_backend(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("log_level", mode="after")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.strip().upper()


# Singleton instance
settings = Settings.model_validate({})
