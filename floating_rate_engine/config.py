"""
Engine configuration using Pydantic Settings.

Values are read from FRE_* environment variables or a local .env file and
only supply defaults for incoming pricing requests.
"""

import logging
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Defaults for pricing requests, loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FRE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Loan defaults
    default_index_rate: float = 0.05
    default_day_count: str = "30/360"
    default_payments_per_year: int = 12
    default_term_months: int = 60

    # Pricing defaults
    default_discount_yield: float = 0.0825

    log_level: str = "INFO"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """Route engine log records to stderr at the configured level."""
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
