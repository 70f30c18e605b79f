"""SQLite-backed key-value store for persisted configuration.

Holds exactly two keys: the record-source connection profile and the
generation API credential.  Values are loaded once at startup and written
only on an explicit save.
"""

from __future__ import annotations

import json
import sqlite3
from datetime import UTC, datetime
from pathlib import Path

from pydantic import SecretStr

from outreach.sources.airtable import AirtableProfile

SOURCE_PROFILE_KEY = "source_profile"
GENERATION_CREDENTIAL_KEY = "generation_credential"


def init_config_db(db_path: Path) -> sqlite3.Connection:
    """Open the configuration database and create its table.

    Args:
        db_path: Path to the SQLite database file.

    Returns:
        An open sqlite3.Connection with WAL mode enabled.
    """
    conn = sqlite3.connect(str(db_path))
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("""
        CREATE TABLE IF NOT EXISTS settings_kv (
            key TEXT PRIMARY KEY,
            value_json TEXT NOT NULL,
            updated_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now'))
        )
    """)
    conn.commit()
    return conn


class ConfigStore:
    """Persist and load the connection profile and generation credential."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def _put(self, key: str, value: object) -> None:
        now = datetime.now(tz=UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
        self._conn.execute(
            "INSERT OR REPLACE INTO settings_kv (key, value_json, updated_at) VALUES (?, ?, ?)",
            (key, json.dumps(value), now),
        )
        self._conn.commit()

    def _get(self, key: str) -> object | None:
        row = self._conn.execute(
            "SELECT value_json FROM settings_kv WHERE key = ?",
            (key,),
        ).fetchone()
        if row is None:
            return None
        return json.loads(row[0])

    def save_source_profile(self, profile: AirtableProfile) -> None:
        """Persist *profile*, including the raw API key."""
        self._put(
            SOURCE_PROFILE_KEY,
            {
                "api_key": profile.api_key.get_secret_value(),
                "base_id": profile.base_id,
                "table_name": profile.table_name,
            },
        )

    def load_source_profile(self) -> AirtableProfile | None:
        """Return the saved profile, or ``None`` if none was saved."""
        value = self._get(SOURCE_PROFILE_KEY)
        if not isinstance(value, dict):
            return None
        return AirtableProfile.model_validate(value)

    def save_generation_credential(self, api_key: str) -> None:
        """Persist the generation API key."""
        self._put(GENERATION_CREDENTIAL_KEY, api_key)

    def load_generation_credential(self) -> SecretStr | None:
        """Return the saved generation API key, or ``None``."""
        value = self._get(GENERATION_CREDENTIAL_KEY)
        if not isinstance(value, str) or not value:
            return None
        return SecretStr(value)


def close_config_db(conn: sqlite3.Connection) -> None:
    """Close the configuration database connection."""
    conn.close()
