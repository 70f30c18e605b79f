"""Record sources: the paged read interface and its Airtable / Sheets adapters."""

from outreach.sources.airtable import AirtableProfile, AirtableSource
from outreach.sources.base import RecordPage, RecordSource, fetch_all_records, normalize_fields
from outreach.sources.sheets import SheetsSource, create_sheets_source

__all__ = [
    "AirtableProfile",
    "AirtableSource",
    "RecordPage",
    "RecordSource",
    "SheetsSource",
    "create_sheets_source",
    "fetch_all_records",
    "normalize_fields",
]
