"""Mail-dispatch collaborators: mail-client link and Gmail API."""

from outreach.dispatch.base import MailDispatcher, build_dispatch_request
from outreach.dispatch.gmail import GmailDispatcher
from outreach.dispatch.mailto import MailtoDispatcher, build_mailto_url

__all__ = [
    "GmailDispatcher",
    "MailDispatcher",
    "MailtoDispatcher",
    "build_dispatch_request",
    "build_mailto_url",
]
