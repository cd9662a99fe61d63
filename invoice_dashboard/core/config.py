# invoice_dashboard/core/config.py
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Backends:
    """Names of the interchangeable repository strategies."""
    ORM = "orm"
    SQL = "sql"
    DBAPI = "dbapi"

    ALL = (ORM, SQL, DBAPI)


class Settings(BaseSettings):
    """
    Configuration of the dashboard core, loaded from environment variables
    and an optional .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # --- Database ---
    database_url: str = Field("sqlite:///./dashboard.db", alias="DATABASE_URL")
    database_backend: Literal["orm", "sql", "dbapi"] = Field(Backends.ORM, alias="DATABASE_BACKEND")
    pool_size: int = Field(10, alias="POOL_SIZE")
    max_overflow: int = Field(20, alias="MAX_OVERFLOW")

    # --- Listing ---
    items_per_page: int = Field(6, gt=0, alias="ITEMS_PER_PAGE")
    latest_invoices_limit: int = Field(5, gt=0, alias="LATEST_INVOICES_LIMIT")

    # --- Summary ---
    summary_workers: int = Field(4, gt=0, alias="SUMMARY_WORKERS")

    # --- Security ---
    bcrypt_rounds: int = Field(12, ge=4, le=31, alias="BCRYPT_ROUNDS")

    # --- Logging ---
    log_level: str = Field("INFO", alias="LOG_LEVEL")


@lru_cache
def get_settings() -> Settings:
    return Settings()
