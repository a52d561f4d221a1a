"""Client settings loaded from environment variables and .env file."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE = "https://api.github.com"


class Settings(BaseSettings):
    """Credentials and endpoint for the GitHub wrapper."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    github_token: str | None = None
    github_username: str | None = None
    github_password: str | None = None
    github_api_base: str = DEFAULT_API_BASE


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
