"""Tests for the chat and campaign generation calls."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import anthropic
import httpx
import pytest

from outreach.domain.errors import TransportFailure
from outreach.domain.models import CampaignContext, ConversationTurn, Recipient
from outreach.domain.types import TurnRole
from outreach.llm.generation import (
    history_messages,
    recipient_sample,
    request_campaign,
    request_chat_reply,
)

_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def _context() -> CampaignContext:
    return CampaignContext(
        total_record_count=3, filtered_count=2, selected_count=0, cap=80
    )


def _recipients(n: int) -> list[Recipient]:
    return [Recipient(email=f"c{i}@x.com", display_name=f"Client {i}") for i in range(n)]


class TestHistoryMessages:
    """Tests for history_messages."""

    def test_maps_roles(self) -> None:
        history = [
            ConversationTurn(role=TurnRole.USER, content="hi"),
            ConversationTurn(role=TurnRole.ASSISTANT, content="hello", is_error=True),
        ]
        assert history_messages(history) == [
            {"role": "user", "content": "hi"},
            {"role": "assistant", "content": "hello"},
        ]


class TestRecipientSample:
    """Tests for recipient_sample."""

    def test_numbered_and_capped(self) -> None:
        sample = recipient_sample(_recipients(5), sample_cap=2)
        assert sample == [
            {"index": 1, "name": "Client 0", "email": "c0@x.com"},
            {"index": 2, "name": "Client 1", "email": "c1@x.com"},
        ]


class TestRequestChatReply:
    """Tests for request_chat_reply."""

    @pytest.mark.anyio()
    async def test_sends_context_and_history(self, anthropic_client_factory) -> None:
        client = anthropic_client_factory("  You have 3 clients.  ")
        history = [
            ConversationTurn(role=TurnRole.USER, content="first"),
            ConversationTurn(role=TurnRole.ASSISTANT, content="answer"),
        ]

        reply = await request_chat_reply(client, _context(), history, "How many clients?")

        assert reply == "You have 3 clients."
        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["messages"][-1] == {"role": "user", "content": "How many clients?"}
        assert len(kwargs["messages"]) == 3
        context_block = kwargs["system"][1]["text"]
        assert '"client_db_context"' in context_block
        assert '"total_record_count": 3' in context_block

    @pytest.mark.anyio()
    async def test_passes_model_settings(self, anthropic_client_factory) -> None:
        client = anthropic_client_factory("ok")
        await request_chat_reply(
            client, _context(), [], "hi", model="test-model", temperature=0.1, max_tokens=50
        )
        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["temperature"] == 0.1
        assert kwargs["max_tokens"] == 50

    @pytest.mark.anyio()
    async def test_empty_reply_is_transport_failure(self, anthropic_client_factory) -> None:
        client = anthropic_client_factory("   ")
        with pytest.raises(TransportFailure, match="No content"):
            await request_chat_reply(client, _context(), [], "hi")

    @pytest.mark.anyio()
    async def test_status_error_mapped(self) -> None:
        client = MagicMock()
        client.messages.create = AsyncMock(
            side_effect=anthropic.RateLimitError(
                "rate limited", response=httpx.Response(429, request=_REQUEST), body=None
            )
        )
        with pytest.raises(TransportFailure) as exc_info:
            await request_chat_reply(client, _context(), [], "hi")
        assert exc_info.value.status_code == 429
        assert exc_info.value.collaborator == "anthropic"

    @pytest.mark.anyio()
    async def test_connection_error_mapped(self) -> None:
        client = MagicMock()
        client.messages.create = AsyncMock(
            side_effect=anthropic.APIConnectionError(request=_REQUEST)
        )
        with pytest.raises(TransportFailure) as exc_info:
            await request_chat_reply(client, _context(), [], "hi")
        assert exc_info.value.status_code is None

    @pytest.mark.anyio()
    async def test_non_text_blocks_skipped(self, anthropic_client_factory) -> None:
        client = anthropic_client_factory("Hello there")
        response = await client.messages.create()
        tool_block = MagicMock(spec=["type", "input"])
        response.content = [tool_block, *response.content]
        client.messages.create = AsyncMock(return_value=response)

        assert await request_chat_reply(client, _context(), [], "hi") == "Hello there"


class TestRequestCampaign:
    """Tests for request_campaign."""

    @pytest.mark.anyio()
    async def test_prompt_carries_capped_sample(
        self, anthropic_client_factory, campaign_json: str
    ) -> None:
        client = anthropic_client_factory(campaign_json)

        raw = await request_campaign(
            client, "Spring promo", _recipients(5), ["client 0"], sample_cap=3
        )

        assert raw == campaign_json
        kwargs = client.messages.create.call_args.kwargs
        assert isinstance(kwargs["system"], str)
        assert '"bodyHtml": "string"' in kwargs["system"]
        assert "{{" not in kwargs["system"]
        user_text = kwargs["messages"][0]["content"]
        assert "Spring promo" in user_text
        assert "c2@x.com" in user_text
        assert "c3@x.com" not in user_text
        assert json.dumps(["client 0"]) in user_text
