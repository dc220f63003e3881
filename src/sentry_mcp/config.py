"""Configuration for the Sentry MCP server."""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    def __init__(self, missing: List[str]) -> None:
        self.missing = missing
        super().__init__(
            "; ".join(f"{name} environment variable is required." for name in missing)
        )


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    service_name: str = Field(default="sentry-mcp")

    sentry_base_url: str
    sentry_auth_token: str
    sentry_org_slug: str
    sentry_timeout_seconds: float = Field(default=10)
    sentry_max_retries: int = Field(default=3, ge=0)
    sentry_retry_backoff_seconds: float = Field(default=1.0, ge=0)

    log_level: str = Field(default="INFO")

    @field_validator("sentry_base_url", "sentry_auth_token", "sentry_org_slug", mode="before")
    @classmethod
    def _reject_blank(cls, value: Optional[str]) -> Optional[str]:
        if isinstance(value, str) and not value.strip():
            raise ValueError("must not be blank")
        return value


_REQUIRED = ("sentry_base_url", "sentry_auth_token", "sentry_org_slug")


def load_settings(**overrides) -> Settings:
    """Build settings from the environment, failing fast on missing values."""
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        missing = sorted(
            {
                str(error["loc"][0]).upper()
                for error in exc.errors()
                if error["loc"] and error["loc"][0] in _REQUIRED
            }
        )
        if not missing:
            raise
        raise ConfigurationError(missing) from exc

