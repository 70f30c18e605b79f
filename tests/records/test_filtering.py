"""Tests for the filter pipeline."""

from __future__ import annotations

import pytest

from outreach.domain.models import FilterState, Record
from outreach.records.filtering import apply_filters, matches_field, matches_search


class TestMatchesSearch:
    """Tests for matches_search."""

    def test_case_insensitive(self, sample_records: list[Record]) -> None:
        assert matches_search(sample_records[0], "BOSTON")

    def test_matches_any_field(self, sample_records: list[Record]) -> None:
        assert matches_search(sample_records[0], "vip")

    def test_matches_list_values(self, sample_records: list[Record]) -> None:
        assert matches_search(sample_records[2], "east")

    def test_matches_boolean_values(self, sample_records: list[Record]) -> None:
        assert matches_search(sample_records[3], "TRUE")

    def test_no_match(self, sample_records: list[Record]) -> None:
        assert not matches_search(sample_records[0], "zzz")


class TestMatchesField:
    """Tests for matches_field."""

    def test_missing_field_only_matches_empty_pattern(self, sample_records: list[Record]) -> None:
        ana = sample_records[2]
        assert not matches_field(ana, "Email", "@")
        assert matches_field(ana, "Email", "")


class TestApplyFilters:
    """Tests for apply_filters."""

    def test_empty_state_returns_everything(self, sample_records: list[Record]) -> None:
        assert apply_filters(sample_records, FilterState()) == sample_records

    def test_search_term(self, sample_records: list[Record]) -> None:
        result = apply_filters(sample_records, FilterState(search_term="acme"))
        assert [r.id for r in result] == ["rec1", "rec4"]

    def test_field_filter(self, sample_records: list[Record]) -> None:
        result = apply_filters(sample_records, FilterState(field_filters={"City": "bos"}))
        assert [r.id for r in result] == ["rec1", "rec3"]

    def test_field_filters_are_anded(self, sample_records: list[Record]) -> None:
        state = FilterState(field_filters={"City": "boston", "Company": "acme"})
        assert [r.id for r in apply_filters(sample_records, state)] == ["rec1"]

    def test_search_and_field_filter_are_anded(self, sample_records: list[Record]) -> None:
        state = FilterState(search_term="acme", field_filters={"City": "austin"})
        assert [r.id for r in apply_filters(sample_records, state)] == ["rec4"]

    def test_field_filter_only_checks_named_field(self, sample_records: list[Record]) -> None:
        # "Boston" appears in City, not Company
        state = FilterState(field_filters={"Company": "boston"})
        assert apply_filters(sample_records, state) == []

    def test_blank_patterns_ignored(self, sample_records: list[Record]) -> None:
        state = FilterState(field_filters={"City": "", "Company": ""})
        assert apply_filters(sample_records, state) == sample_records

    def test_does_not_mutate_input(self, sample_records: list[Record]) -> None:
        original = list(sample_records)
        apply_filters(sample_records, FilterState(search_term="acme"))
        assert sample_records == original

    @pytest.mark.parametrize(
        "state",
        [
            FilterState(),
            FilterState(search_term="o"),
            FilterState(field_filters={"City": "boston"}),
            FilterState(search_term="a", field_filters={"Company": "i"}),
            FilterState(search_term="nothing-matches"),
        ],
    )
    def test_idempotent_subset_in_order(
        self, sample_records: list[Record], state: FilterState
    ) -> None:
        once = apply_filters(sample_records, state)
        twice = apply_filters(once, state)
        assert twice == once
        positions = [sample_records.index(r) for r in once]
        assert positions == sorted(positions)
