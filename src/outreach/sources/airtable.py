"""Airtable record source.

Reads a table through the Airtable REST API, 100 records per page, following
the ``offset`` continuation token until the API stops returning one.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, SecretStr

from outreach.domain.errors import ConfigIncomplete, TransportFailure
from outreach.domain.models import Record
from outreach.resilience.retry import resilient_api_call
from outreach.sources.base import RecordPage, normalize_fields

logger = structlog.get_logger()

AIRTABLE_API_URL = "https://api.airtable.com/v0"
MAX_PAGE_SIZE = 100


class AirtableProfile(BaseModel):
    """Connection profile for one Airtable table."""

    model_config = ConfigDict(frozen=True)

    api_key: SecretStr = SecretStr("")
    base_id: str = ""
    table_name: str = ""

    def missing_fields(self) -> list[str]:
        """Names of the required settings that are empty."""
        missing: list[str] = []
        if not self.api_key.get_secret_value():
            missing.append("Airtable API key")
        if not self.base_id.strip():
            missing.append("Base ID")
        if not self.table_name.strip():
            missing.append("Table name")
        return missing

    def require_complete(self) -> None:
        """Raise ``ConfigIncomplete`` if any required setting is empty."""
        missing = self.missing_fields()
        if missing:
            raise ConfigIncomplete(missing)


def _error_detail(response: httpx.Response) -> str:
    """Pull Airtable's error message out of a failed response."""
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        return str(error.get("message") or error.get("type") or response.reason_phrase)
    if isinstance(error, str):
        return error
    return response.reason_phrase


class AirtableSource:
    """Paged ``RecordSource`` over one Airtable table.

    Args:
        profile: The connection profile; must be complete.
        page_size: Records per request (Airtable caps this at 100).
        transport: Optional httpx transport, used in tests.
    """

    name = "airtable"

    def __init__(
        self,
        profile: AirtableProfile,
        *,
        page_size: int = MAX_PAGE_SIZE,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        profile.require_complete()
        self._profile = profile
        self._page_size = min(page_size, MAX_PAGE_SIZE)
        self._transport = transport

    @property
    def url(self) -> str:
        """The table's list-records endpoint."""
        table = quote(self._profile.table_name, safe="")
        return f"{AIRTABLE_API_URL}/{self._profile.base_id}/{table}"

    @resilient_api_call("airtable")
    async def _request_page(self, params: dict[str, Any]) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {self._profile.api_key.get_secret_value()}"}
        async with httpx.AsyncClient(transport=self._transport, timeout=30.0) as client:
            response = await client.get(self.url, params=params, headers=headers)

        if not response.is_success:
            raise TransportFailure("airtable", _error_detail(response), response.status_code)

        try:
            data = response.json()
        except ValueError as exc:
            raise TransportFailure(
                "airtable", "Response body is not valid JSON", response.status_code
            ) from exc
        if not isinstance(data, dict):
            raise TransportFailure(
                "airtable", "Response body is not a JSON object", response.status_code
            )
        return data

    async def fetch_page(self, continuation_token: str | None = None) -> RecordPage:
        """Fetch one page of records.

        Raises:
            TransportFailure: On a non-success response or a network error.
        """
        params: dict[str, Any] = {"pageSize": self._page_size}
        if continuation_token:
            params["offset"] = continuation_token

        try:
            data = await self._request_page(params)
        except httpx.TransportError as exc:
            raise TransportFailure("airtable", str(exc) or type(exc).__name__) from exc

        records = [
            Record(id=str(item["id"]), fields=normalize_fields(item.get("fields") or {}))
            for item in data.get("records") or []
        ]
        return RecordPage(records=records, continuation_token=data.get("offset") or None)
