"""Persisted configuration storage."""

from outreach.state.config_store import (
    GENERATION_CREDENTIAL_KEY,
    SOURCE_PROFILE_KEY,
    ConfigStore,
    close_config_db,
    init_config_db,
)

__all__ = [
    "GENERATION_CREDENTIAL_KEY",
    "SOURCE_PROFILE_KEY",
    "ConfigStore",
    "close_config_db",
    "init_config_db",
]
