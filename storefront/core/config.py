# storefront/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Environment / .env configuration.

    The four Supabase values have no default and must be set; the
    storefront policies below fall back to their defaults.
    """

    PROJECT_NAME: str = "Storefront Backend"
    API_V1_STR: str = "/api/v1"

    # Supabase project and its Postgres
    SUPABASE_URL: str
    SUPABASE_KEY: str
    DATABASE_URL: str

    # Access tokens are verified locally with the project JWT secret
    SUPABASE_JWT_SECRET: str
    SUPABASE_JWT_ALG: str = "HS256"

    # How many times a cart write is retried after a version conflict
    CART_WRITE_RETRIES: int = 3

    # True  => checkout clamps stock at 0 and accepts the order (backorder)
    # False => checkout is rejected when a line exceeds available stock
    ALLOW_BACKORDER: bool = True

    # Vendor dashboard: products below this stock count as "low stock"
    LOW_STOCK_THRESHOLD: int = 10

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Settings are parsed once per process."""
    return Settings()
