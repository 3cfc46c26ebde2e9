"""Application settings loaded from environment variables."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fair_maturity.utils.logging_config import parse_level


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Application settings with env var support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_env: Environment = Environment.DEVELOPMENT
    log_level: str = "INFO"
    module_log_levels: dict[str, str] = Field(
        default_factory=dict,
        description='Per-logger levels as JSON, e.g. {"fair_maturity.checks": "DEBUG"}.',
    )

    # GitHub. Code search requires a token.
    github_token: str | None = None
    github_host: str = Field(
        default="github.com",
        description="Repository host served by github_api_url; other hosts are rejected.",
    )
    github_api_url: str = "https://api.github.com"
    github_request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout in seconds for GitHub API calls.",
    )

    # Result cache
    cache_ttl_seconds: float = Field(
        default=300.0,
        gt=0,
        description="How long a repository lookup is reused within a run.",
    )

    # Checks
    community_members: list[str] = Field(
        default_factory=list,
        description="Logins considered part of the hosting community (for collaborator checks).",
    )
    pull_request_sample_size: int = Field(
        default=10,
        ge=1,
        le=30,
        description="How many recent pull requests to inspect for reviews.",
    )

    # Scoring
    eval_config_path: str | None = None

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        parse_level(value)
        return value.strip().upper()

    @field_validator("module_log_levels")
    @classmethod
    def _check_module_levels(cls, value: dict[str, str]) -> dict[str, str]:
        for level in value.values():
            parse_level(level)
        return {name: level.strip().upper() for name, level in value.items()}

    @property
    def is_development(self) -> bool:
        return self.app_env == Environment.DEVELOPMENT


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        The singleton Settings loaded from environment / .env file.
        Cached after the first call via ``lru_cache``.
    """
    return Settings()
