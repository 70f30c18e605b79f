"""Context builder producing the bounded snapshot sent to the model.

Records are slimmed to an allow-list of name, email, location and company
fields and the samples are truncated to fixed caps.  This only shrinks the
model payload; the full records stay in the store.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from outreach.domain.models import CampaignContext, Record, SlimRecord
from outreach.llm.client import MAX_RECORDS_FOR_CONTEXT
from outreach.records.fields import DEFAULT_ALIASES, FieldAliases


def slim_record(record: Record, allow_list: Iterable[str]) -> SlimRecord:
    """Keep only the allow-listed fields present on *record*."""
    fields = {key: record.fields[key] for key in allow_list if key in record.fields}
    return SlimRecord(id=record.id, fields=fields)


def build_campaign_context(
    filtered_view: Sequence[Record],
    selected_ids: Sequence[str],
    *,
    total_record_count: int,
    filtered_cap: int = MAX_RECORDS_FOR_CONTEXT,
    selected_cap: int = MAX_RECORDS_FOR_CONTEXT,
    aliases: FieldAliases = DEFAULT_ALIASES,
) -> CampaignContext:
    """Build a ``CampaignContext`` for one generation request.

    Args:
        filtered_view: The current filtered view, in store order.
        selected_ids: Selected record ids.
        total_record_count: Size of the full record store.
        filtered_cap: Maximum records in ``filtered_sample``.
        selected_cap: Maximum records in ``selected_sample``.
        aliases: Alias lists defining the field allow-list.

    Returns:
        A fresh context with true aggregate counts and capped samples.
    """
    allow_list = aliases.context_allow_list
    selected = set(selected_ids)
    selected_records = [r for r in filtered_view if r.id in selected]

    return CampaignContext(
        total_record_count=total_record_count,
        filtered_count=len(filtered_view),
        selected_count=len(selected_ids),
        selected_ids=list(selected_ids),
        cap=filtered_cap,
        filtered_sample=[slim_record(r, allow_list) for r in filtered_view[:filtered_cap]],
        selected_sample=[slim_record(r, allow_list) for r in selected_records[:selected_cap]],
    )
