"""Google Sheets record source.

Wraps ``gspread`` to expose a worksheet as a single-page ``RecordSource``.
Rows have no native id, so each record is identified by its sheet row
number (``row-2`` is the first data row).
"""

from __future__ import annotations

import asyncio

import gspread
import structlog

from outreach.auth.credentials import get_sheets_client
from outreach.domain.errors import TransportFailure
from outreach.domain.models import Record
from outreach.sources.base import RecordPage, normalize_fields

logger = structlog.get_logger()

# Header occupies row 1
_FIRST_DATA_ROW = 2


class SheetsSource:
    """Read every row of a worksheet as records.

    Args:
        gc: An authenticated ``gspread.Client``.
        spreadsheet_key: The Google Sheets spreadsheet ID.
        worksheet_name: Name of the worksheet tab.
    """

    name = "sheets"

    def __init__(self, gc: gspread.Client, spreadsheet_key: str, worksheet_name: str = "Sheet1") -> None:
        self._gc = gc
        self._spreadsheet_key = spreadsheet_key
        self._worksheet_name = worksheet_name
        self._spreadsheet: gspread.Spreadsheet | None = None

    def _get_spreadsheet(self) -> gspread.Spreadsheet:
        """Lazy-load and cache the spreadsheet."""
        if self._spreadsheet is None:
            self._spreadsheet = self._gc.open_by_key(self._spreadsheet_key)
        return self._spreadsheet

    def read_records(self) -> list[Record]:
        """Read all rows with one ``get_all_records()`` call.

        Rows whose cells are all empty are skipped.
        """
        worksheet = self._get_spreadsheet().worksheet(self._worksheet_name)
        rows = worksheet.get_all_records()

        records: list[Record] = []
        for offset, row in enumerate(rows):
            fields = normalize_fields(row)
            if not fields:
                continue
            records.append(Record(id=f"row-{offset + _FIRST_DATA_ROW}", fields=fields))
        return records

    async def fetch_page(self, continuation_token: str | None = None) -> RecordPage:
        """Return the whole worksheet as one page.

        Raises:
            TransportFailure: If the Sheets API call fails.
        """
        try:
            records = await asyncio.to_thread(self.read_records)
        except gspread.exceptions.GSpreadException as exc:
            raise TransportFailure("sheets", str(exc) or type(exc).__name__) from exc
        return RecordPage(records=records)


def create_sheets_source(
    spreadsheet_key: str,
    worksheet_name: str = "Sheet1",
    service_account_path: str | None = None,
) -> SheetsSource:
    """Create a ``SheetsSource`` using service account credentials."""
    gc = get_sheets_client(service_account_path)
    return SheetsSource(gc, spreadsheet_key, worksheet_name)
