"""Campaign lifecycle state machine with transition validation."""

from outreach.state_machine.machine import CampaignLifecycle
from outreach.state_machine.transitions import TERMINAL_STATES, TRANSITIONS, CampaignEvent

__all__ = [
    "TERMINAL_STATES",
    "TRANSITIONS",
    "CampaignEvent",
    "CampaignLifecycle",
]
