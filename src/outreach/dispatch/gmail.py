"""Dispatch a campaign as a single Gmail message.

All recipients go in the ``To`` header, matching the mail-client flow.
"""

from __future__ import annotations

import asyncio
import base64
from email.message import EmailMessage
from typing import Any

import structlog
from googleapiclient.errors import HttpError

from outreach.domain.errors import TransportFailure
from outreach.domain.models import DispatchRequest

logger = structlog.get_logger()


class GmailDispatcher:
    """Send campaigns through the Gmail API.

    Args:
        service: An authenticated Gmail API v1 service resource.
        from_email: The address to use as the ``From`` header.
    """

    name = "gmail"

    def __init__(self, service: Any, from_email: str) -> None:
        self._service = service
        self._from_email = from_email

    def build_message(self, request: DispatchRequest) -> dict[str, str]:
        """Encode *request* as a Gmail ``users.messages.send`` body."""
        message = EmailMessage()
        message.set_content(request.body)
        message["To"] = ", ".join(request.recipient_emails)
        message["From"] = self._from_email
        message["Subject"] = request.subject

        encoded = base64.urlsafe_b64encode(message.as_bytes()).decode()
        return {"raw": encoded}

    def send(self, request: DispatchRequest) -> dict[str, Any]:
        """Send synchronously and return the Gmail API response."""
        payload = self.build_message(request)
        try:
            result: dict[str, Any] = (
                self._service.users().messages().send(userId="me", body=payload).execute()
            )
        except HttpError as exc:
            raise TransportFailure("gmail", str(exc.reason), exc.status_code) from exc
        return result

    async def dispatch(self, request: DispatchRequest) -> dict[str, Any]:
        result = await asyncio.to_thread(self.send, request)
        logger.info(
            "campaign_sent_via_gmail",
            message_id=result.get("id"),
            recipient_count=len(request.recipient_emails),
        )
        return result
