"""Dispatch by opening the user's default mail client with a ``mailto:`` link."""

from __future__ import annotations

import asyncio
import webbrowser
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

import structlog

from outreach.domain.models import DispatchRequest

logger = structlog.get_logger()


def build_mailto_url(request: DispatchRequest) -> str:
    """Return a ``mailto:`` URL with all recipients, subject and body.

    Addresses are comma-joined; subject and body are percent-encoded.
    """
    to_list = ",".join(request.recipient_emails)
    subject = quote(request.subject, safe="")
    body = quote(request.body, safe="")
    return f"mailto:{to_list}?subject={subject}&body={body}"


class MailtoDispatcher:
    """Hands the campaign to the desktop mail client.

    Args:
        opener: Callable that opens a URL; defaults to ``webbrowser.open``.
    """

    name = "mailto"

    def __init__(self, opener: Callable[[str], Any] | None = None) -> None:
        self._opener = opener or webbrowser.open

    async def dispatch(self, request: DispatchRequest) -> dict[str, Any]:
        url = build_mailto_url(request)
        await asyncio.to_thread(self._opener, url)
        logger.info("mail_client_opened", recipient_count=len(request.recipient_emails))
        return {"url": url, "recipient_count": len(request.recipient_emails)}
