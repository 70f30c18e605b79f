"""Google credential management for the Sheets source and Gmail dispatch."""

from outreach.auth.credentials import (
    get_gmail_credentials,
    get_gmail_service,
    get_sheets_client,
)

__all__ = [
    "get_gmail_credentials",
    "get_gmail_service",
    "get_sheets_client",
]
