"""Tests for the campaign response parser."""

from __future__ import annotations

import pytest

from outreach.domain.errors import MalformedResponse
from outreach.llm.parser import parse_campaign_response


class TestParseCampaignResponse:
    """Tests for strict decoding and brace-span recovery."""

    def test_bare_json(self, campaign_json: str) -> None:
        draft = parse_campaign_response(campaign_json)
        assert draft.subject == "Spring launch"
        assert draft.preview_text == "Join us"
        assert draft.body_html == "<p>Hello</p>"
        assert draft.body_text == "Hello"

    def test_recovers_fenced_json(self, campaign_json: str) -> None:
        raw = f"Here you go:\n```json\n{campaign_json}\n```\nLet me know!"
        draft = parse_campaign_response(raw)
        assert draft.subject == "Spring launch"

    def test_recovers_bare_code_fence(self) -> None:
        raw = (
            '```json\n{"subject":"Hi","previewText":"p",'
            '"bodyHtml":"<p>x</p>","bodyText":"x"}\n```'
        )
        draft = parse_campaign_response(raw)
        assert (draft.subject, draft.preview_text, draft.body_html, draft.body_text) == (
            "Hi",
            "p",
            "<p>x</p>",
            "x",
        )

    def test_recovery_spans_first_to_last_brace(self) -> None:
        raw = (
            'Sure! {"subject": "S", "previewText": "P", '
            '"bodyHtml": "<style>p {color: red}</style>", "bodyText": "T"} Thanks.'
        )
        draft = parse_campaign_response(raw)
        assert draft.body_html == "<style>p {color: red}</style>"

    def test_missing_fields_fails(self) -> None:
        with pytest.raises(MalformedResponse, match="missing or invalid fields") as exc_info:
            parse_campaign_response('{"subject":"Hi"}')
        assert "bodyHtml" in str(exc_info.value)

    def test_non_string_field_fails(self) -> None:
        raw = '{"subject": 5, "previewText": "P", "bodyHtml": "H", "bodyText": "T"}'
        with pytest.raises(MalformedResponse, match="subject"):
            parse_campaign_response(raw)

    def test_no_braces_fails(self) -> None:
        with pytest.raises(MalformedResponse, match="no JSON object found"):
            parse_campaign_response("I cannot write that email.")

    def test_invalid_span_fails(self) -> None:
        with pytest.raises(MalformedResponse, match="invalid JSON"):
            parse_campaign_response("prefix {not json at all} suffix")

    def test_json_array_fails(self) -> None:
        with pytest.raises(MalformedResponse, match="not a JSON object"):
            parse_campaign_response("[1, 2, 3]")

    def test_keeps_raw_excerpt(self) -> None:
        raw = "x" * 500
        with pytest.raises(MalformedResponse) as exc_info:
            parse_campaign_response(raw)
        assert exc_info.value.raw_excerpt == "x" * 200

    def test_empty_strings_are_valid(self) -> None:
        raw = '{"subject": "", "previewText": "", "bodyHtml": "", "bodyText": ""}'
        draft = parse_campaign_response(raw)
        assert draft.subject == ""
