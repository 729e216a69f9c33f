"""
Settings for the API and the Celery worker, read from the environment (.env in development).

Startup fails fast on a missing Supabase secret, and in production on CORS
origins that would expose the API to any site or to localhost.
"""

from functools import lru_cache
from typing import ClassVar
from urllib.parse import urlparse

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    REQUIRED_SECRETS: ClassVar[tuple[str, ...]] = ("supabase_url", "supabase_service_role_key")
    LOCAL_HOSTNAMES: ClassVar[frozenset[str]] = frozenset({"localhost", "127.0.0.1", "0.0.0.0"})

    environment: str = "development"  # development | staging | production

    app_name: str = "FocusForge API"
    debug: bool = False
    log_level: str = ""  # empty: DEBUG when debug, else INFO
    api_prefix: str = "/api/v1"
    cors_origins: list[str] = ["http://localhost:3000"]

    # Supabase (service role)
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    supabase_timeout_seconds: int = 10

    # Redis
    redis_url: str = "redis://localhost:6379"
    redis_max_connections: int = 20
    redis_connect_attempts: int = 3
    cache_socket_timeout_seconds: float = 2.0

    # Per-user progress lock
    progress_lock_timeout_seconds: int = 10
    progress_lock_wait_seconds: float = 3.0

    # slowapi
    rate_limit_enabled: bool = True
    rate_limit_default: str = "60/minute"

    # PostHog
    posthog_enabled: bool = False
    posthog_api_key: str = ""
    posthog_host: str = "https://us.i.posthog.com"

    # Insight provider (text generation API)
    insight_api_url: str = ""
    insight_api_key: str = ""
    insight_timeout_seconds: float = 15.0
    insight_cache_ttl_seconds: int = 6 * 3600

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS[1:])}")
        return level

    @model_validator(mode="after")
    def validate_required_secrets(self) -> "Settings":
        missing = [
            name.upper() for name in self.REQUIRED_SECRETS if not getattr(self, name).strip()
        ]
        if missing:
            raise ValueError(
                f"Missing required secrets: {', '.join(missing)}. "
                "Set these environment variables before starting the application."
            )
        return self

    @model_validator(mode="after")
    def validate_cors_origins_in_production(self) -> "Settings":
        if self.environment != "production":
            return self

        for origin in self.cors_origins:
            if origin == "*":
                raise ValueError("Wildcard (*) CORS origin is not allowed in production.")
            hostname = urlparse(origin).hostname or origin
            if hostname in self.LOCAL_HOSTNAMES:
                raise ValueError(
                    f"CORS origin '{origin}' points at {hostname}; not allowed in production."
                )
        return self

    @property
    def insights_configured(self) -> bool:
        return bool(self.insight_api_url.strip())


@lru_cache
def get_settings() -> Settings:
    return Settings()
