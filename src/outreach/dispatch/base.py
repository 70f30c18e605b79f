"""Mail-dispatch collaborator protocol and request construction."""

from __future__ import annotations

from typing import Any, Protocol

from outreach.domain.errors import DispatchPreconditionFailure
from outreach.domain.models import Campaign, DispatchRequest


class MailDispatcher(Protocol):
    """Receives a finished campaign and composes / sends it."""

    name: str

    async def dispatch(self, request: DispatchRequest) -> dict[str, Any]:
        """Hand *request* off; return collaborator-specific details."""
        ...


def build_dispatch_request(campaign: Campaign | None) -> DispatchRequest:
    """Build the dispatch hand-off for *campaign*.

    Raises:
        DispatchPreconditionFailure: If there is no campaign, no recipient
            with an email, or no subject/body to send.
    """
    if campaign is None:
        raise DispatchPreconditionFailure("No email campaign to send.")

    emails = [r.email for r in campaign.recipients if r.email]
    if not emails:
        raise DispatchPreconditionFailure("No valid email addresses found.")

    if not campaign.subject or not campaign.dispatch_body:
        raise DispatchPreconditionFailure("Campaign is missing a subject or body.")

    return DispatchRequest(
        recipient_emails=emails,
        subject=campaign.subject,
        body=campaign.dispatch_body,
    )
