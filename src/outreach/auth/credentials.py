"""Google credential helpers for the Sheets source and the Gmail dispatcher.

Provides:
- a gspread client backed by a service account
- Gmail OAuth2 credentials (send scope only) and the Gmail service client
"""

from __future__ import annotations

import os
from pathlib import Path

import google.auth.transport.requests
import gspread
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow  # type: ignore[import-untyped]
from googleapiclient.discovery import Resource, build

from outreach.domain.errors import ConfigIncomplete

GMAIL_SEND_SCOPES: list[str] = ["https://www.googleapis.com/auth/gmail.send"]

DEFAULT_TOKEN_PATH = Path("token.json")
DEFAULT_CREDENTIALS_PATH = Path("credentials.json")


def get_sheets_client(service_account_path: str | Path | None = None) -> gspread.Client:
    """Load a gspread client using service account credentials.

    Resolution order: explicit argument, ``SHEETS_SERVICE_ACCOUNT_PATH``,
    then gspread's default location.
    """
    if service_account_path is not None:
        return gspread.service_account(filename=str(service_account_path))

    env_path = os.environ.get("SHEETS_SERVICE_ACCOUNT_PATH")
    if env_path:
        return gspread.service_account(filename=env_path)

    return gspread.service_account()


def get_gmail_credentials(
    token_path: str | Path = DEFAULT_TOKEN_PATH,
    credentials_path: str | Path = DEFAULT_CREDENTIALS_PATH,
) -> Credentials:
    """Load Gmail send credentials, refreshing or running the OAuth flow.

    The resulting token is written back to *token_path*.

    Raises:
        ConfigIncomplete: If there is no usable token and no client-secrets
            file to start the OAuth flow from.
    """
    token_path = Path(token_path)
    credentials_path = Path(credentials_path)
    creds: Credentials | None = None

    if token_path.exists():
        creds = Credentials.from_authorized_user_file(str(token_path), GMAIL_SEND_SCOPES)  # type: ignore[no-untyped-call]

    if creds and creds.valid:
        return creds

    if creds and creds.expired and creds.refresh_token:
        creds.refresh(google.auth.transport.requests.Request())
    else:
        if not credentials_path.exists():
            raise ConfigIncomplete([f"Gmail client secrets ({credentials_path})"])
        flow = InstalledAppFlow.from_client_secrets_file(str(credentials_path), GMAIL_SEND_SCOPES)
        creds = flow.run_local_server(port=0)

    token_path.write_text(creds.to_json())
    return creds


def get_gmail_service(credentials: Credentials) -> Resource:
    """Build a Gmail API v1 service client from *credentials*."""
    return build("gmail", "v1", credentials=credentials)
