"""Tests for RecordStore."""

from __future__ import annotations

from outreach.domain.models import Record
from outreach.records.store import RecordStore


class TestRecordStore:
    """Tests for RecordStore lookups and field names."""

    def test_preserves_order(self, sample_records: list[Record]) -> None:
        store = RecordStore(sample_records)
        assert [r.id for r in store] == ["rec1", "rec2", "rec3", "rec4"]
        assert len(store) == 4

    def test_get(self, sample_records: list[Record]) -> None:
        store = RecordStore(sample_records)
        record = store.get("rec2")
        assert record is not None
        assert record.fields["Full Name"] == "Marcus Lee"
        assert store.get("missing") is None

    def test_contains(self, sample_records: list[Record]) -> None:
        store = RecordStore(sample_records)
        assert "rec1" in store
        assert "nope" not in store

    def test_field_names_from_first_record(self, sample_records: list[Record]) -> None:
        store = RecordStore(sample_records)
        assert store.field_names == ["Full Name", "Email", "City", "Company", "Notes"]

    def test_empty_store(self) -> None:
        store = RecordStore()
        assert store.field_names == []
        assert store.records == ()
