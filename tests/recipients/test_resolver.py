"""Tests for recipient resolution."""

from __future__ import annotations

from outreach.domain.models import Record
from outreach.recipients.resolver import (
    display_name_for,
    find_email_field,
    names_mentioned_in,
    recipients_from,
    resolve_recipients,
    to_recipient,
)
from outreach.records.fields import FieldAliases


class TestFindEmailField:
    """Tests for find_email_field."""

    def test_matches_any_spelling(self) -> None:
        assert find_email_field({"Name": "A", "EMAIL2": "a@x.com"}) == "EMAIL2"
        assert find_email_field({"e-mail": "a@x.com"}) == "e-mail"
        assert find_email_field({"Work Email Address": "a@x.com"}) == "Work Email Address"

    def test_first_qualifying_key_wins(self) -> None:
        assert find_email_field({"Email": "a@x.com", "EMAIL2": "b@x.com"}) == "Email"

    def test_none_when_absent(self) -> None:
        assert find_email_field({"Name": "A"}) is None


class TestToRecipient:
    """Tests for to_recipient and display names."""

    def test_unconventional_email_column(self) -> None:
        record = Record(id="r", fields={"Full Name": "A", "EMAIL2": "a@x.com"})
        recipient = to_recipient(record)
        assert recipient is not None
        assert recipient.email == "a@x.com"
        assert recipient.display_name == "A"

    def test_strips_email(self) -> None:
        recipient = to_recipient(Record(id="r", fields={"Email": "  a@x.com "}))
        assert recipient is not None
        assert recipient.email == "a@x.com"

    def test_no_email_field_returns_none(self) -> None:
        assert to_recipient(Record(id="r", fields={"Full Name": "A"})) is None

    def test_blank_email_returns_none(self) -> None:
        assert to_recipient(Record(id="r", fields={"Email": "   "})) is None

    def test_display_name_fallback(self) -> None:
        assert display_name_for({"Email": "a@x.com"}) == "Client"

    def test_display_name_alias_order(self) -> None:
        fields = {"First Name": "Ann", "Name": "Ann Smith"}
        assert display_name_for(fields) == "Ann Smith"

    def test_custom_default_display_name(self) -> None:
        aliases = FieldAliases(default_display_name="Friend")
        assert display_name_for({}, aliases) == "Friend"

    def test_recipients_from_drops_unreachable(self, sample_records: list[Record]) -> None:
        emails = [r.email for r in recipients_from(sample_records)]
        assert emails == ["tina@example.com", "marcus@example.com", "omar@example.com"]


class TestResolveRecipients:
    """Tests for the two-tier resolution."""

    def test_name_mention_fallback(self, sample_records: list[Record]) -> None:
        recipients = resolve_recipients(
            sample_records, [], sample_records, "Write Tina Cheng a thank-you note"
        )
        assert [r.email for r in recipients] == ["tina@example.com"]
        assert recipients[0].display_name == "Tina Cheng"

    def test_name_mention_is_case_insensitive(self, sample_records: list[Record]) -> None:
        recipients = resolve_recipients(sample_records, [], sample_records, "email MARCUS LEE")
        assert [r.email for r in recipients] == ["marcus@example.com"]

    def test_selection_preempts_name_mention(self, sample_records: list[Record]) -> None:
        recipients = resolve_recipients(
            sample_records, ["rec2"], sample_records, "Write Tina Cheng a note"
        )
        assert [r.email for r in recipients] == ["marcus@example.com"]

    def test_selection_searches_full_store(self, sample_records: list[Record]) -> None:
        # rec4 is selected but filtered out of the view
        recipients = resolve_recipients(sample_records, ["rec4"], sample_records[:2])
        assert [r.email for r in recipients] == ["omar@example.com"]

    def test_selection_follows_store_order(self, sample_records: list[Record]) -> None:
        recipients = resolve_recipients(sample_records, ["rec4", "rec1"], sample_records)
        assert [r.email for r in recipients] == ["tina@example.com", "omar@example.com"]

    def test_inert_selection_ids_ignored(self, sample_records: list[Record]) -> None:
        recipients = resolve_recipients(sample_records, ["gone", "rec2"], sample_records)
        assert [r.email for r in recipients] == ["marcus@example.com"]

    def test_only_inert_ids_falls_through_to_mention(self, sample_records: list[Record]) -> None:
        recipients = resolve_recipients(sample_records, ["gone"], sample_records, "Hi Omar Haddad")
        assert [r.email for r in recipients] == ["omar@example.com"]

    def test_name_mention_limited_to_filtered_view(self, sample_records: list[Record]) -> None:
        recipients = resolve_recipients(
            sample_records, [], sample_records[1:], "Write Tina Cheng a note"
        )
        assert recipients == []

    def test_selected_record_without_email_dropped(self, sample_records: list[Record]) -> None:
        recipients = resolve_recipients(sample_records, ["rec3"], sample_records)
        assert recipients == []

    def test_no_selection_no_prompt(self, sample_records: list[Record]) -> None:
        assert resolve_recipients(sample_records, [], sample_records) == []

    def test_prompt_without_names(self, sample_records: list[Record]) -> None:
        assert resolve_recipients(sample_records, [], sample_records, "Spring sale") == []


class TestNamesMentionedIn:
    """Tests for names_mentioned_in."""

    def test_distinct_lowercase_names(self, sample_records: list[Record]) -> None:
        names = names_mentioned_in(sample_records, "Invite Tina Cheng and Ana Ruiz")
        assert names == ["tina cheng", "ana ruiz"]
