"""Filter pipeline deriving the filtered view from the record store.

``apply_filters`` is a pure function of its inputs: no partial state is
cached between calls, so the view can never drift from the current store
and filter state.
"""

from __future__ import annotations

from collections.abc import Iterable

from outreach.domain.models import FilterState, Record, stringify_value


def matches_search(record: Record, term: str) -> bool:
    """True if any field value of *record* contains *term* (case-insensitive)."""
    needle = term.lower()
    return any(needle in stringify_value(value).lower() for value in record.fields.values())


def matches_field(record: Record, field_name: str, pattern: str) -> bool:
    """True if *field_name*'s value contains *pattern* (case-insensitive).

    A missing field is treated as the empty string.
    """
    return pattern.lower() in record.value_text(field_name).lower()


def apply_filters(records: Iterable[Record], filter_state: FilterState) -> list[Record]:
    """Return the records passing the search term and every field filter.

    The search term and field filters are ANDed; empty patterns are
    ignored.  Input order is preserved.

    Args:
        records: Records in store order.
        filter_state: Current search term and field filters.

    Returns:
        The filtered view as a new list.
    """
    results = list(records)

    if filter_state.search_term:
        results = [r for r in results if matches_search(r, filter_state.search_term)]

    for field_name, pattern in filter_state.field_filters.items():
        if pattern:
            results = [r for r in results if matches_field(r, field_name, pattern)]

    return results
