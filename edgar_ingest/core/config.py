"""
config.py — Centralized Application Configuration Loader

Purpose:
- Define a single source of truth for ingestion settings.
- Load and validate environment variables from `.env` or OS environment.

Core Workflow:
1. Scrape a quarterly EDGAR full index → XBRL instance documents on disk
2. Drain unparsed report files → raw facts → canonical financial reports

Components receive a settings object explicitly (see
`EdgarClientSettings.from_app_settings()`); the module-level `settings`
singleton is only the default used at process startup.

This module does NOT:
- Execute any DB connections.
- Make external API calls.
"""

from pathlib import Path
from typing import Any, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# .env should sit at the project root, next to pyproject.toml
_CONFIG_DIR = Path(__file__).parent  # edgar_ingest/core
_PROJECT_DIR = _CONFIG_DIR.parent.parent
_ENV_FILE = _PROJECT_DIR / ".env"

if _ENV_FILE.exists():
    _ENV_FILE_PATH = str(_ENV_FILE.resolve())
else:
    # Fallback: use relative path (pydantic will look in CWD)
    _ENV_FILE_PATH = ".env"


class Settings(BaseSettings):
    """
    Settings container for the scraper and the normalization consumer.
    """
    # EDGAR HTTP access
    EDGAR_USER_AGENT: str = Field(
        "edgar-ingest/0.1 (contact: ingestion@example.com)",
        description="SEC-compliant User-Agent string for EDGAR requests",
    )
    EDGAR_REQUEST_SLEEP_SECONDS: float = Field(
        0.15,
        description="Polite delay between EDGAR requests (seconds)",
    )
    EDGAR_REQUEST_TIMEOUT_SECONDS: int = Field(
        60,
        description="HTTP timeout for EDGAR requests (seconds)",
    )
    EDGAR_MAX_RETRIES: int = Field(
        3,
        description="Maximum attempts for throttled or failed EDGAR requests",
    )
    EDGAR_BACKOFF_BASE: float = Field(
        0.6,
        description="Exponential backoff base for retry delays",
    )

    # Storage
    DATABASE_URL: str = Field(
        "sqlite:///edgar_ingest.db",
        description="SQLAlchemy database URL for companies, report files and reports",
    )
    TMP_DIR: str = Field(
        "data/tmp_store",
        description="Root directory of the bucket/key file store",
    )

    # Index scraping
    INDEX_MAX_LINE_LENGTH: int = Field(
        4096,
        description="Index lines longer than this many bytes are skipped",
    )

    # Normalization consumer
    REPORT_BATCH_LIMIT: int = Field(
        20,
        description="Number of unparsed report files pulled per batch",
    )
    NORMALIZE_FORM_TYPES: List[str] = Field(
        default_factory=lambda: ["10-K", "10-Q"],
        description=(
            "Form families the normalization consumer parses, matched anywhere in the form type "
            "(10-K also covers 10-K/A, 10-KT, 10-K405); others are marked parsed and skipped"
        ),
    )

    LOG_LEVEL: str = Field("INFO", description="Root log level")

    @field_validator("EDGAR_USER_AGENT", mode="before")
    @classmethod
    def strip_user_agent(cls, v: Any) -> str:
        """SEC rejects requests without a User-Agent."""
        if isinstance(v, str):
            v = v.strip()
        if not v:
            raise ValueError("EDGAR_USER_AGENT must not be empty")
        return v

    @field_validator("EDGAR_MAX_RETRIES", "REPORT_BATCH_LIMIT", "INDEX_MAX_LINE_LENGTH")
    @classmethod
    def at_least_one(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE_PATH,
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Singleton: settings imported anywhere will reference same object.
settings = Settings()
