"""Shared pytest fixtures for the outreach test suite."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from outreach.domain.models import Record


def make_anthropic_client(*texts: str) -> MagicMock:
    """Mock ``AsyncAnthropic`` whose ``messages.create`` returns *texts* in turn."""
    responses = []
    for text in texts:
        block = MagicMock()
        block.text = text
        response = MagicMock()
        response.content = [block]
        response.usage.input_tokens = 321
        response.usage.output_tokens = 123
        responses.append(response)

    client = MagicMock()
    client.messages.create = AsyncMock(side_effect=responses)
    return client


CAMPAIGN_JSON = (
    '{"subject": "Spring launch", "previewText": "Join us", '
    '"bodyHtml": "<p>Hello</p>", "bodyText": "Hello"}'
)


@pytest.fixture()
def sample_records() -> list[Record]:
    """A small client table with mixed column spellings."""
    rows: list[dict[str, Any]] = [
        {
            "id": "rec1",
            "fields": {
                "Full Name": "Tina Cheng",
                "Email": "tina@example.com",
                "City": "Boston",
                "Company": "Acme",
                "Notes": "VIP",
            },
        },
        {
            "id": "rec2",
            "fields": {
                "Full Name": "Marcus Lee",
                "Email": "marcus@example.com",
                "City": "Denver",
                "Company": "Globex",
            },
        },
        {
            "id": "rec3",
            "fields": {
                "Full Name": "Ana Ruiz",
                "City": "Boston",
                "Company": "Initech",
                "Tags": ["lead", "east"],
            },
        },
        {
            "id": "rec4",
            "fields": {
                "Full Name": "Omar Haddad",
                "Email": "omar@example.com",
                "City": "Austin",
                "Company": "Acme",
                "Active": True,
            },
        },
    ]
    return [Record.model_validate(r) for r in rows]


@pytest.fixture()
def campaign_json() -> str:
    return CAMPAIGN_JSON


@pytest.fixture()
def anthropic_client_factory():
    """Return the mock-client builder so tests can script replies."""
    return make_anthropic_client


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """The code under test is asyncio-based; run anyio-marked tests on asyncio only."""
    return "asyncio"
