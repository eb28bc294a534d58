"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite+aiosqlite:///./uipathfinder.sqlite3"

    # LLM provider (Fireworks.ai, OpenAI-compatible API)
    fireworks_api_key: SecretStr | None = None
    fireworks_base_url: str = "https://api.fireworks.ai/inference/v1"
    llm_max_tokens: int = 1500

    # Per-model timeout (seconds); None waits indefinitely
    llm_timeout_seconds: float | None = None

    # Road routing
    enable_route_segments: bool = True
    osrm_base_url: str = "http://router.project-osrm.org/route/v1/driving"
    osrm_timeout_seconds: float = 4.0

    # Auth0
    auth0_domain: str = ""
    auth0_audience: str = "urn:uipathfinder-api"

    # History listing
    history_page_default: int = 20
    history_page_max: int = 100


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
