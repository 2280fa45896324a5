"""Application configuration managed via environment variables."""
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "BalanceBuddy API"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: List[str] = ["http://localhost:3000"]
    greeting: str = "Hello BalanceBuddy"
    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "balancebuddy"


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
