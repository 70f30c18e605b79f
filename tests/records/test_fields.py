"""Tests for field alias loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from outreach.records.fields import DEFAULT_ALIASES, FieldAliases, load_field_aliases


class TestFieldAliases:
    """Tests for FieldAliases and load_field_aliases."""

    def test_default_allow_list_covers_all_groups(self) -> None:
        allow = DEFAULT_ALIASES.context_allow_list
        for name in ("Full Name", "Last Name", "EMAIL2", "PERSON_CITY", "Company"):
            assert name in allow

    def test_allow_list_has_no_duplicates(self) -> None:
        aliases = FieldAliases(names=("Name",), context_names=("Name",), emails=("Name",))
        assert aliases.context_allow_list.count("Name") == 1

    def test_none_returns_defaults(self) -> None:
        assert load_field_aliases(None) is DEFAULT_ALIASES

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="not found"):
            load_field_aliases(tmp_path / "missing.yaml")

    def test_yaml_overrides_and_keeps_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "aliases.yaml"
        path.write_text(
            "field_aliases:\n"
            "  names:\n"
            "    - Contact\n"
            "  default_display_name: Friend\n"
        )
        aliases = load_field_aliases(path)
        assert aliases.names == ("Contact",)
        assert aliases.default_display_name == "Friend"
        assert aliases.emails == DEFAULT_ALIASES.emails

    def test_shipped_config_matches_defaults(self) -> None:
        path = Path(__file__).resolve().parents[2] / "config" / "field_aliases.yaml"
        aliases = load_field_aliases(path)
        assert aliases.names == DEFAULT_ALIASES.names
        assert aliases.emails == DEFAULT_ALIASES.emails
