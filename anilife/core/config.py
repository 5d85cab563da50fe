from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
    )

    PORT: int = 8000
    HOST: str = "0.0.0.0"
    APP_NAME: str = "Anilife"
    APP_ENV: Literal["development", "production"] = "production"

    # Load the demo catalog into the in-memory store on startup
    SEED_CATALOG: bool = True

    # Where viewer favorites / watch-later / history live
    PREFERENCE_BACKEND: Literal["memory", "redis"] = "memory"
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_PREFERENCE_KEY: str = "anilife:prefs:"
    REDIS_MAX_CONNECTIONS: int = 20

    # Watch history keeps this many titles, most recent first
    WATCH_HISTORY_LIMIT: int = 50
    SEARCH_MIN_QUERY_LENGTH: int = 2


settings = Settings()

