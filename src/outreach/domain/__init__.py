"""Domain types, models, and errors for the outreach engine."""

from outreach.domain.errors import (
    ConfigIncomplete,
    DispatchPreconditionFailure,
    InvalidTransitionError,
    MalformedResponse,
    NoRecipientsResolved,
    OutreachError,
    TransportFailure,
)
from outreach.domain.models import (
    Campaign,
    CampaignContext,
    CampaignDraft,
    ConversationTurn,
    DispatchRequest,
    FilterState,
    Recipient,
    Record,
    SlimRecord,
    stringify_value,
)
from outreach.domain.types import CampaignState, TurnRole

__all__ = [
    "Campaign",
    "CampaignContext",
    "CampaignDraft",
    "CampaignState",
    "ConfigIncomplete",
    "ConversationTurn",
    "DispatchPreconditionFailure",
    "DispatchRequest",
    "FilterState",
    "InvalidTransitionError",
    "MalformedResponse",
    "NoRecipientsResolved",
    "OutreachError",
    "Recipient",
    "Record",
    "SlimRecord",
    "TransportFailure",
    "TurnRole",
    "stringify_value",
]
