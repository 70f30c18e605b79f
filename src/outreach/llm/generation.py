"""Chat and campaign-generation calls against the Anthropic API.

Each call is a single request/response.  Failures are surfaced as
``TransportFailure`` and never retried here.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

import anthropic
import structlog
from anthropic import AsyncAnthropic

from outreach.domain.errors import TransportFailure
from outreach.domain.models import CampaignContext, ConversationTurn, Recipient
from outreach.llm.client import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    GENERATION_MODEL,
    MAX_RECIPIENTS_FOR_PROMPT,
)
from outreach.llm.prompts import (
    CAMPAIGN_SYSTEM_PROMPT,
    CAMPAIGN_USER_PROMPT,
    CHAT_CONTEXT_PROMPT,
    CHAT_SYSTEM_PROMPT,
)

logger = structlog.get_logger()


async def _create_message(
    client: AsyncAnthropic,
    *,
    system: list[dict[str, Any]] | str,
    messages: list[dict[str, str]],
    model: str,
    temperature: float,
    max_tokens: int,
) -> str:
    """Send one Messages API request and return the reply text."""
    try:
        response = await client.messages.create(
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
            system=system,
            messages=messages,
        )
    except anthropic.APIStatusError as exc:
        raise TransportFailure("anthropic", exc.message, exc.status_code) from exc
    except anthropic.APIError as exc:
        raise TransportFailure("anthropic", str(exc)) from exc

    # Non-text blocks (tool use, thinking) carry no reply text
    text = "".join(
        block.text for block in response.content if isinstance(getattr(block, "text", None), str)
    ).strip()
    if not text:
        raise TransportFailure("anthropic", "No content returned from the model")

    logger.info(
        "generation_call_completed",
        model=model,
        input_tokens=response.usage.input_tokens,
        output_tokens=response.usage.output_tokens,
    )
    return text


def history_messages(history: Sequence[ConversationTurn]) -> list[dict[str, str]]:
    """Map transcript turns to Messages API ``{role, content}`` dicts."""
    return [{"role": turn.role.value, "content": turn.content} for turn in history]


async def request_chat_reply(
    client: AsyncAnthropic,
    context: CampaignContext,
    history: Sequence[ConversationTurn],
    message: str,
    *,
    model: str = GENERATION_MODEL,
    temperature: float = DEFAULT_TEMPERATURE,
    max_tokens: int = DEFAULT_MAX_TOKENS,
) -> str:
    """Ask the model a free-form question about the current record set.

    The system prompt carries the instructions and the context payload; the
    prior transcript and the new message follow as conversation turns.

    Args:
        client: Async Anthropic client.
        context: Bounded snapshot of the record set.
        history: Transcript turns preceding *message*.
        message: The user's new message.

    Returns:
        The assistant's reply text.

    Raises:
        TransportFailure: On an API error or an empty reply.
    """
    context_json = json.dumps(
        {"client_db_context": context.model_dump(mode="json")}, indent=2
    )
    system = [
        {"type": "text", "text": CHAT_SYSTEM_PROMPT.format(cap=context.cap)},
        {
            "type": "text",
            "text": CHAT_CONTEXT_PROMPT.format(cap=context.cap, context_json=context_json),
        },
    ]
    messages = [*history_messages(history), {"role": "user", "content": message}]
    return await _create_message(
        client,
        system=system,
        messages=messages,
        model=model,
        temperature=temperature,
        max_tokens=max_tokens,
    )


def recipient_sample(
    recipients: Sequence[Recipient], sample_cap: int = MAX_RECIPIENTS_FOR_PROMPT
) -> list[dict[str, Any]]:
    """Numbered ``{index, name, email}`` entries for the first *sample_cap* recipients."""
    return [
        {"index": index, "name": r.display_name, "email": r.email}
        for index, r in enumerate(recipients[:sample_cap], start=1)
    ]


async def request_campaign(
    client: AsyncAnthropic,
    instructions: str,
    recipients: Sequence[Recipient],
    mentioned_names: Sequence[str],
    *,
    sample_cap: int = MAX_RECIPIENTS_FOR_PROMPT,
    model: str = GENERATION_MODEL,
    temperature: float = DEFAULT_TEMPERATURE,
    max_tokens: int = DEFAULT_MAX_TOKENS,
) -> str:
    """Ask the model to draft a campaign and return its raw response text.

    Only a capped sample of recipients is shown to the model; the caller
    keeps the full list for dispatch.

    Raises:
        TransportFailure: On an API error or an empty reply.
    """
    user_text = CAMPAIGN_USER_PROMPT.format(
        instructions=instructions,
        sample_cap=sample_cap,
        recipients_json=json.dumps(recipient_sample(recipients, sample_cap), indent=2),
        mentioned_names_json=json.dumps(list(mentioned_names)),
    )
    return await _create_message(
        client,
        system=CAMPAIGN_SYSTEM_PROMPT,
        messages=[{"role": "user", "content": user_text}],
        model=model,
        temperature=temperature,
        max_tokens=max_tokens,
    )
