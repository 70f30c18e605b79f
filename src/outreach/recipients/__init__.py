"""Recipient resolution for campaign generation."""

from outreach.recipients.resolver import (
    display_name_for,
    find_email_field,
    names_mentioned_in,
    records_mentioned_in,
    resolve_recipients,
    to_recipient,
)

__all__ = [
    "display_name_for",
    "find_email_field",
    "names_mentioned_in",
    "records_mentioned_in",
    "resolve_recipients",
    "to_recipient",
]
