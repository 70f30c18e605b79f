"""Record store, filter pipeline, pagination, and selection tracking."""

from outreach.records.fields import DEFAULT_ALIASES, FieldAliases, load_field_aliases
from outreach.records.filtering import apply_filters
from outreach.records.pagination import Page, clamp_page, page_count, paginate
from outreach.records.selection import SelectionSet
from outreach.records.store import RecordStore

__all__ = [
    "DEFAULT_ALIASES",
    "FieldAliases",
    "Page",
    "RecordStore",
    "SelectionSet",
    "apply_filters",
    "clamp_page",
    "load_field_aliases",
    "page_count",
    "paginate",
]
