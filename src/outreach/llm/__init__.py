"""LLM integration: client factory, prompts, context builder, response parser,
and the chat / campaign-generation calls."""

from outreach.llm.client import (
    GENERATION_MODEL,
    MAX_RECIPIENTS_FOR_PROMPT,
    MAX_RECORDS_FOR_CONTEXT,
    get_anthropic_client,
)
from outreach.llm.context import build_campaign_context, slim_record
from outreach.llm.generation import request_campaign, request_chat_reply
from outreach.llm.parser import parse_campaign_response

__all__ = [
    "GENERATION_MODEL",
    "MAX_RECIPIENTS_FOR_PROMPT",
    "MAX_RECORDS_FOR_CONTEXT",
    "build_campaign_context",
    "get_anthropic_client",
    "parse_campaign_response",
    "request_campaign",
    "request_chat_reply",
    "slim_record",
]
