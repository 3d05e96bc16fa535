"""Application settings for ShopCatalog.

Settings are read from environment variables prefixed with ``SHOPCATALOG_``
(or a local ``.env`` file). Use get_settings() to access the cached instance.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SNAPSHOT_DIR = "catalog"
DEFAULT_CSV_DIR = "data/catalog"
DEFAULT_PAGE_SIZE = 9
DEFAULT_RECOMMENDATION_LIMIT = 4
DEFAULT_SEARCH_DEBOUNCE_MS = 500
FALLBACK_PRICE_CEILING = 1_000_000


class Settings(BaseSettings):
    """Runtime configuration for the API, the scripts and the client."""

    model_config = SettingsConfigDict(
        env_prefix="SHOPCATALOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(default="INFO", description="Root log level")
    snapshot_dir: str = Field(
        default=DEFAULT_SNAPSHOT_DIR,
        description="Directory holding the joblib catalog snapshot",
    )
    csv_dir: str = Field(
        default=DEFAULT_CSV_DIR,
        description="Directory holding the raw catalog CSV tables",
    )
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
    max_page_size: int = Field(default=100, ge=1)
    recommendation_limit: int = Field(default=DEFAULT_RECOMMENDATION_LIMIT, ge=1)
    search_debounce_ms: int = Field(default=DEFAULT_SEARCH_DEBOUNCE_MS, ge=0)
    api_base_url: str = Field(default="http://localhost:8000")
    request_timeout: float = Field(default=10.0, gt=0)


@lru_cache()
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
