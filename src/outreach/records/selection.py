"""Set of record ids explicitly marked by the user."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from outreach.domain.models import Record


class SelectionSet:
    """Insertion-ordered set of selected record ids.

    Ids that no longer refer to a record in the store are kept but inert:
    resolution simply finds nothing for them.
    """

    def __init__(self, ids: Iterable[str] = ()) -> None:
        self._ids: dict[str, None] = dict.fromkeys(ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._ids

    @property
    def ids(self) -> list[str]:
        """Selected ids in the order they were selected."""
        return list(self._ids)

    def toggle(self, record_id: str) -> bool:
        """Flip *record_id*'s membership.

        Returns:
            ``True`` if the id is selected after the call.
        """
        if record_id in self._ids:
            del self._ids[record_id]
            return False
        self._ids[record_id] = None
        return True

    def select_all(self, records: Iterable[Record]) -> None:
        """Replace the selection with exactly the ids of *records*."""
        self._ids = dict.fromkeys(r.id for r in records)

    def clear(self) -> None:
        """Deselect everything."""
        self._ids.clear()
