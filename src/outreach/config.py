"""Centralized, typed configuration using pydantic-settings.

Provides a single ``Settings`` class backed by ``.env`` file and environment
variables, a cached ``get_settings()`` accessor, and ``validate_credentials()``
which reports missing collaborator settings at startup.

This module imports nothing from the ``outreach`` package so that every
other module can depend on it.
"""

from __future__ import annotations

import sys
from functools import lru_cache
from pathlib import Path

import structlog
from pydantic import Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger()


class Settings(BaseSettings):
    """Application settings loaded from environment variables and ``.env`` file.

    ``SecretStr`` fields keep credentials out of logs and reprs.  The
    context caps are read once at startup; nothing changes them while the
    session runs.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- General ---------------------------------------------------------------
    production: bool = False
    config_db_path: Path = Path("data/outreach.db")
    field_aliases_path: Path | None = None

    # -- Airtable --------------------------------------------------------------
    airtable_api_key: SecretStr = SecretStr("")
    airtable_base_id: str = ""
    airtable_table_name: str = ""
    airtable_page_size: int = Field(default=100, ge=1, le=100)

    # -- Google Sheets ---------------------------------------------------------
    google_sheets_key: str = ""
    sheets_worksheet: str = "Sheet1"
    sheets_service_account_path: Path = Path("~/.config/gspread/service_account.json")

    # -- Gmail -----------------------------------------------------------------
    gmail_token_path: Path = Path("token.json")
    gmail_credentials_path: Path = Path("credentials.json")
    sender_email: str = ""

    # -- LLM / Anthropic -------------------------------------------------------
    anthropic_api_key: SecretStr = SecretStr("")
    generation_model: str = "claude-sonnet-4-5-20250929"
    generation_temperature: float = Field(default=0.7, ge=0.0, le=1.0)
    generation_max_tokens: int = Field(default=2048, gt=0)

    # -- Record view and model payload bounds ----------------------------------
    page_size: int = Field(default=10, gt=0)
    context_filtered_cap: int = Field(default=80, gt=0)
    context_selected_cap: int = Field(default=80, gt=0)
    recipient_sample_cap: int = Field(default=80, gt=0)


@lru_cache
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance.

    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    try:
        return Settings()
    except ValidationError as exc:
        # Only the structured errors list; the exception text may hold secrets.
        logger.error("settings_validation_failed", errors=exc.errors())
        sys.exit(1)


def validate_credentials(settings: Settings) -> list[str]:
    """Report which collaborator settings are missing.

    Nothing here is fatal: the record source and the generation credential
    can still be supplied interactively and saved.  Each gap is logged as a
    warning and returned.

    Args:
        settings: The loaded application settings.

    Returns:
        Human-readable descriptions of the missing settings.
    """
    missing: list[str] = []

    has_airtable = bool(
        settings.airtable_api_key.get_secret_value()
        and settings.airtable_base_id
        and settings.airtable_table_name
    )
    if not has_airtable and not settings.google_sheets_key:
        missing.append("No record source configured (AIRTABLE_* or GOOGLE_SHEETS_KEY)")

    if settings.google_sheets_key:
        sa_path = settings.sheets_service_account_path.expanduser()
        if not sa_path.exists():
            missing.append(f"Sheets service account file not found: {sa_path}")

    if not settings.anthropic_api_key.get_secret_value():
        missing.append("ANTHROPIC_API_KEY is empty or not set")

    if not missing:
        logger.info("credential_validation_passed")
    for detail in missing:
        logger.warning("credential_missing", detail=detail)
    return missing
