"""Domain-specific exception classes for the outreach engine.

Every error here is recoverable: ``OutreachSession`` catches them at the
boundary where they occur and turns them into a banner and/or an
error-flagged transcript entry.
"""

from outreach.domain.types import CampaignState


class OutreachError(Exception):
    """Base class for all domain errors in the outreach engine."""


class ConfigIncomplete(OutreachError):
    """Raised when connection or credential fields are missing.

    Attributes:
        missing: Human-readable names of the missing fields.
    """

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"Missing configuration: {', '.join(self.missing)}")


class TransportFailure(OutreachError):
    """Raised when a collaborator call returns a non-success response.

    Attributes:
        collaborator: Which collaborator failed (``"airtable"``, ``"anthropic"``...).
        detail: Error detail reported by the collaborator.
        status_code: HTTP status code, when one was received.
    """

    def __init__(self, collaborator: str, detail: str, status_code: int | None = None) -> None:
        self.collaborator = collaborator
        self.detail = detail
        self.status_code = status_code
        prefix = f"{collaborator} error"
        if status_code is not None:
            prefix = f"{prefix} {status_code}"
        super().__init__(f"{prefix}: {detail}")


class NoRecipientsResolved(OutreachError):
    """Raised when neither selection nor the prompt identified any recipient."""

    def __init__(self) -> None:
        super().__init__(
            "No recipients found. Please select at least one client (with an email) "
            "or mention a client name clearly in your prompt."
        )


class MalformedResponse(OutreachError):
    """Raised when a generation response cannot be decoded into a campaign.

    Attributes:
        reason: Why decoding failed.
        raw_excerpt: The first 200 characters of the offending response.
    """

    def __init__(self, reason: str, raw_text: str = "") -> None:
        self.reason = reason
        self.raw_excerpt = raw_text[:200]
        super().__init__(f"Malformed campaign response: {reason}")


class DispatchPreconditionFailure(OutreachError):
    """Raised when dispatch is attempted without a campaign or recipients."""


class InvalidTransitionError(OutreachError):
    """Raised when an invalid campaign lifecycle transition is attempted.

    Attributes:
        current_state: The state the lifecycle was in.
        event: The event that was rejected.
    """

    def __init__(self, current_state: CampaignState, event: str) -> None:
        self.current_state = current_state
        self.event = event
        super().__init__(f"Cannot apply event '{event}' in state '{current_state}'")
