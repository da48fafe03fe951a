# app/core/config.py
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Everything has a default so the service boots against a local SQLite
    file and local media storage. Typical .env for a hosted setup:

      - DATABASE_URL (Postgres connection string)
      - STORAGE_BACKEND=supabase
      - SUPABASE_URL
      - SUPABASE_SERVICE_ROLE_KEY
    """

    PROJECT_NAME: str = "Product Catalog API"
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:8080",
    ]

    # Database
    DATABASE_URL: str = "sqlite:///./catalog.db"
    DATABASE_ECHO: bool = False

    # Catalog rules
    PAGE_SIZE: int = 9
    MAX_IMAGE_KB: int = 5120

    # Media storage
    STORAGE_BACKEND: Literal["local", "supabase"] = "local"
    MEDIA_ROOT: str = "./storage/media"
    MEDIA_URL: str = "/media"

    # Supabase storage (only read when STORAGE_BACKEND=supabase)
    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_ROLE_KEY: str | None = None
    STORAGE_BUCKET: str = "assets"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
