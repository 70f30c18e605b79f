"""Recipient resolution from explicit selection or names mentioned in a prompt.

Two tiers, evaluated in order:

1. **Explicit selection** -- every record in the store whose id is selected.
   A non-empty result is final; the prompt is ignored.
2. **Name mention** -- only when tier 1 is empty and a prompt is given: every
   record in the *filtered view* whose candidate name appears (lower-cased)
   inside the lower-cased prompt.

Matching is plain substring containment, so short or generic names can
over-match.  That is the accepted behaviour of this heuristic.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

import structlog

from outreach.domain.models import FieldValue, Recipient, Record, stringify_value
from outreach.records.fields import DEFAULT_ALIASES, FieldAliases

logger = structlog.get_logger()


def find_email_field(fields: Mapping[str, FieldValue]) -> str | None:
    """Return the first field whose key looks like an email column.

    A key qualifies if its lower-cased form contains ``"email"`` or equals
    ``"e-mail"``.
    """
    for key in fields:
        lower = key.lower()
        if "email" in lower or lower == "e-mail":
            return key
    return None


def first_alias_value(fields: Mapping[str, FieldValue], aliases: Iterable[str]) -> str | None:
    """Return the text of the first alias present with a non-empty value."""
    for alias in aliases:
        text = stringify_value(fields.get(alias)).strip()
        if text:
            return text
    return None


def display_name_for(fields: Mapping[str, FieldValue], aliases: FieldAliases = DEFAULT_ALIASES) -> str:
    """Derive a display name, falling back to the placeholder name."""
    return first_alias_value(fields, aliases.names) or aliases.default_display_name


def to_recipient(record: Record, aliases: FieldAliases = DEFAULT_ALIASES) -> Recipient | None:
    """Convert *record* to a ``Recipient``.

    Returns:
        ``None`` when the record has no email field or its value is empty.
    """
    email_field = find_email_field(record.fields)
    if email_field is None:
        return None

    email = stringify_value(record.fields[email_field]).strip()
    if not email:
        return None

    return Recipient(
        email=email,
        display_name=display_name_for(record.fields, aliases),
        source_fields=dict(record.fields),
    )


def recipients_from(records: Iterable[Record], aliases: FieldAliases = DEFAULT_ALIASES) -> list[Recipient]:
    """Convert *records* in order, silently dropping those without an email."""
    recipients: list[Recipient] = []
    for record in records:
        recipient = to_recipient(record, aliases)
        if recipient is not None:
            recipients.append(recipient)
    return recipients


def records_mentioned_in(
    view: Iterable[Record],
    prompt: str,
    aliases: FieldAliases = DEFAULT_ALIASES,
) -> list[Record]:
    """Return records of *view* whose candidate name appears in *prompt*."""
    lower_prompt = prompt.lower()
    mentioned: list[Record] = []
    for record in view:
        candidate = first_alias_value(record.fields, aliases.names)
        if candidate and candidate.lower() in lower_prompt:
            mentioned.append(record)
    return mentioned


def names_mentioned_in(
    view: Iterable[Record],
    prompt: str,
    aliases: FieldAliases = DEFAULT_ALIASES,
) -> list[str]:
    """Return the distinct lower-cased candidate names found in *prompt*."""
    names: list[str] = []
    for record in records_mentioned_in(view, prompt, aliases):
        candidate = first_alias_value(record.fields, aliases.names) or ""
        name = candidate.lower()
        if name not in names:
            names.append(name)
    return names


def resolve_recipients(
    records: Sequence[Record],
    selected_ids: Iterable[str],
    filtered_view: Sequence[Record],
    prompt: str | None = None,
    aliases: FieldAliases = DEFAULT_ALIASES,
) -> list[Recipient]:
    """Resolve the ordered recipient list for a generation request.

    Args:
        records: The full record store, in store order.
        selected_ids: Ids explicitly selected by the user.  Ids with no
            matching record are ignored.
        filtered_view: The current filtered view, scanned by the
            name-mention fallback.
        prompt: Optional free-text instructions.
        aliases: Field alias lists used for names.

    Returns:
        Recipients in base-list order.  Empty when nothing resolved; the
        caller decides how to report that.
    """
    selected = set(selected_ids)
    base = [r for r in records if r.id in selected]
    tier = "selection"

    if not base and prompt:
        base = records_mentioned_in(filtered_view, prompt, aliases)
        tier = "name_mention"

    recipients = recipients_from(base, aliases)
    logger.debug(
        "recipients_resolved",
        tier=tier,
        base_count=len(base),
        recipient_count=len(recipients),
    )
    return recipients
