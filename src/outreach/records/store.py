"""Canonical in-memory record set.

The store is replaced wholesale on each successful import and never merged
incrementally.  Records keep the order the source returned them in.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from outreach.domain.models import Record


class RecordStore:
    """Offset-ordered, immutable snapshot of imported records."""

    def __init__(self, records: Iterable[Record] = ()) -> None:
        self._records: tuple[Record, ...] = tuple(records)
        self._by_id: dict[str, Record] = {r.id: r for r in self._records}

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._by_id

    @property
    def records(self) -> tuple[Record, ...]:
        """All records in source order."""
        return self._records

    @property
    def field_names(self) -> list[str]:
        """Filterable field names, taken from the first record's fields."""
        if not self._records:
            return []
        return list(self._records[0].fields)

    def get(self, record_id: str) -> Record | None:
        """Return the record with *record_id*, or ``None`` if absent."""
        return self._by_id.get(record_id)
