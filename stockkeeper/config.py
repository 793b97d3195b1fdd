from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "Stockkeeper"
    ENVIRONMENT: str = "local"

    # ==============================
    # Database
    # ==============================
    DATABASE_URL: str = "sqlite:///./stockkeeper.db"

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
    LOG_SQL: bool = False

    # ==============================
    # Security
    # ==============================
    API_KEYS: Optional[str] = None
    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: Optional[str] = None
    JWT_ISSUER: Optional[str] = None
    JWT_REQUIRED: bool = False

    # ==============================
    # Stock movements
    # ==============================
    ATOMIC_MOVEMENTS: bool = True

    # ==============================
    # Reports
    # ==============================
    REPORT_TZ: str = "local"
    RECENT_TRANSACTIONS_LIMIT: int = 50
    ACTIVITY_PAGE_SIZE: int = 10


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
