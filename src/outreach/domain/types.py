"""Enumerations shared across the outreach domain."""

from enum import StrEnum


class CampaignState(StrEnum):
    """Lifecycle states of the single current campaign."""

    NO_CAMPAIGN = "no_campaign"
    GENERATING = "generating"
    PREVIEW_READY = "preview_ready"
    FAILED = "failed"
    DISPATCHED = "dispatched"
    DISCARDED = "discarded"


class TurnRole(StrEnum):
    """Author of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"
