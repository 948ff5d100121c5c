from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables with JSONAPI_ prefix."""

    # App
    debug: bool = False
    log_level: str = "INFO"
    api_prefix: str = ""
    # JSON:API extensions accepted in a request body's Content-Type ext= parameter
    supported_extensions: list[str] = []

    model_config = SettingsConfigDict(env_prefix="JSONAPI_", env_file=".env")


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""
    return Settings()
