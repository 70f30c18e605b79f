"""Transition map for the campaign lifecycle."""

from enum import StrEnum

from outreach.domain.types import CampaignState


class CampaignEvent(StrEnum):
    """Events that move the current campaign between states."""

    START_GENERATION = "start_generation"
    GENERATION_SUCCEEDED = "generation_succeeded"
    GENERATION_FAILED = "generation_failed"
    ACKNOWLEDGE = "acknowledge"
    RESTORE_PREVIEW = "restore_preview"
    DISPATCH = "dispatch"
    DISMISS = "dismiss"
    RESET = "reset"


# Any (state, event) pair not listed here is invalid.
TRANSITIONS: dict[tuple[CampaignState, str], CampaignState] = {
    (CampaignState.NO_CAMPAIGN, CampaignEvent.START_GENERATION): CampaignState.GENERATING,
    # Regenerating keeps the previewed campaign until a new one parses
    (CampaignState.PREVIEW_READY, CampaignEvent.START_GENERATION): CampaignState.GENERATING,
    (CampaignState.GENERATING, CampaignEvent.GENERATION_SUCCEEDED): CampaignState.PREVIEW_READY,
    (CampaignState.GENERATING, CampaignEvent.GENERATION_FAILED): CampaignState.FAILED,
    (CampaignState.FAILED, CampaignEvent.ACKNOWLEDGE): CampaignState.NO_CAMPAIGN,
    # A failed regeneration returns to the campaign that was being previewed
    (CampaignState.FAILED, CampaignEvent.RESTORE_PREVIEW): CampaignState.PREVIEW_READY,
    (CampaignState.PREVIEW_READY, CampaignEvent.DISPATCH): CampaignState.DISPATCHED,
    (CampaignState.PREVIEW_READY, CampaignEvent.DISMISS): CampaignState.DISCARDED,
    # Terminal states return to NO_CAMPAIGN when a new generation starts
    (CampaignState.DISPATCHED, CampaignEvent.RESET): CampaignState.NO_CAMPAIGN,
    (CampaignState.DISCARDED, CampaignEvent.RESET): CampaignState.NO_CAMPAIGN,
}

TERMINAL_STATES: frozenset[CampaignState] = frozenset(
    {CampaignState.DISPATCHED, CampaignState.DISCARDED}
)
