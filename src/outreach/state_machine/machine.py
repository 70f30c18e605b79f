"""CampaignLifecycle class with trigger, history, and valid_events."""

from __future__ import annotations

from outreach.domain.errors import InvalidTransitionError
from outreach.domain.types import CampaignState
from outreach.state_machine.transitions import TERMINAL_STATES, TRANSITIONS, CampaignEvent


class CampaignLifecycle:
    """Finite state machine for the single current campaign.

    Usage::

        lc = CampaignLifecycle()
        lc.trigger("start_generation")       # -> GENERATING
        lc.trigger("generation_succeeded")   # -> PREVIEW_READY
        lc.trigger("dispatch")               # -> DISPATCHED
    """

    def __init__(self, initial_state: CampaignState = CampaignState.NO_CAMPAIGN) -> None:
        self._state: CampaignState = initial_state
        self._history: list[tuple[CampaignState, str, CampaignState]] = []

    @property
    def state(self) -> CampaignState:
        """Return the current lifecycle state."""
        return self._state

    @property
    def is_terminal(self) -> bool:
        """True in DISPATCHED or DISCARDED."""
        return self._state in TERMINAL_STATES

    @property
    def history(self) -> list[tuple[CampaignState, str, CampaignState]]:
        """Return a copy of the ``(from, event, to)`` transition history."""
        return list(self._history)

    def trigger(self, event: str) -> CampaignState:
        """Apply *event* and return the new state.

        Raises:
            InvalidTransitionError: If *event* is not allowed from the
                current state.
        """
        key = (self._state, event)
        if key not in TRANSITIONS:
            raise InvalidTransitionError(self._state, event)

        old_state = self._state
        new_state = TRANSITIONS[key]
        self._history.append((old_state, event, new_state))
        self._state = new_state
        return new_state

    def can_trigger(self, event: str) -> bool:
        """True if *event* is valid from the current state."""
        return (self._state, event) in TRANSITIONS

    def get_valid_events(self) -> list[str]:
        """Return a sorted list of events valid from the current state."""
        return sorted(event for state, event in TRANSITIONS if state == self._state)

    def settle_failure(self, *, has_preview: bool) -> CampaignState:
        """Leave FAILED, returning to the kept preview if there is one."""
        event = CampaignEvent.RESTORE_PREVIEW if has_preview else CampaignEvent.ACKNOWLEDGE
        return self.trigger(event)

    def prepare_generation(self, *, has_preview: bool) -> CampaignState:
        """Bring the lifecycle to a state from which generation can start.

        A failure is settled (back to the kept preview, if any); terminal
        states are reset.  A ready preview stays as it is until the next
        generation succeeds.  Calling this while GENERATING is an invalid
        transition.
        """
        if self._state == CampaignState.FAILED:
            self.settle_failure(has_preview=has_preview)
        elif self.is_terminal:
            self.trigger(CampaignEvent.RESET)
        elif self._state == CampaignState.GENERATING:
            raise InvalidTransitionError(self._state, CampaignEvent.START_GENERATION)
        return self._state
