from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "Shopdesk Business Manager"
    ENVIRONMENT: str = "local"

    # ==============================
    # Database
    # ==============================
    DATABASE_URL: str = "sqlite:///./shopdesk.db"
    SEED_OHADA_CODES: bool = True

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ==============================
    # Sessions
    # ==============================
    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    JWT_ISSUER: Optional[str] = "shopdesk"
    SESSION_TTL_MINUTES: int = 12 * 60
    AUTH_REQUIRED: bool = False
    PASSWORD_PBKDF2_ROUNDS: int = 200_000

    # ==============================
    # Inventory
    # ==============================
    DEFAULT_REORDER_POINT: int = 10

    # ==============================
    # Pagination
    # ==============================
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 500

    # ==============================
    # Dashboard
    # ==============================
    TOP_SUPPLIERS_LIMIT: int = 5
    TOP_PRODUCTS_LIMIT: int = 4
    TOP_CATEGORIES_LIMIT: int = 5

    # ==============================
    # Money / Exports
    # ==============================
    CURRENCY: str = "XAF"
    CURRENCY_LOCALE: str = "fr-FR"
    EXPORT_DIR: str = "exports"


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
