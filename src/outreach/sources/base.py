"""Record-source protocol and the sequential paged import loop."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Protocol

import structlog
from pydantic import BaseModel, ConfigDict, Field

from outreach.domain.models import FieldValue, Record

logger = structlog.get_logger()

# Keys tried, in order, when a structured cell value (collaborator,
# attachment, linked record) has to be rendered as text
_STRUCTURED_TEXT_KEYS = ("name", "email", "url", "filename", "text")


class RecordPage(BaseModel):
    """One page of records plus the token for the next page, if any."""

    model_config = ConfigDict(frozen=True)

    records: list[Record] = Field(default_factory=list)
    continuation_token: str | None = None


class RecordSource(Protocol):
    """A paged read interface over a remote table."""

    name: str

    async def fetch_page(self, continuation_token: str | None = None) -> RecordPage:
        """Fetch the page following *continuation_token* (first page if ``None``)."""
        ...


def _scalar(value: Any) -> str | int | float | bool | None:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Mapping):
        for key in _STRUCTURED_TEXT_KEYS:
            if value.get(key):
                return str(value[key])
        return json.dumps(value, sort_keys=True)
    return str(value)


def normalize_fields(raw: Mapping[str, Any]) -> dict[str, FieldValue]:
    """Coerce raw cell values into ``FieldValue`` shapes.

    Scalars pass through, structured cells are rendered as text, sequences
    become lists of scalars, and ``None`` / empty-string cells are dropped.
    Field order is preserved.
    """
    fields: dict[str, FieldValue] = {}
    for key, value in raw.items():
        if isinstance(value, (list, tuple)):
            items = [s for s in (_scalar(v) for v in value) if s is not None]
            fields[str(key)] = items
            continue
        scalar = _scalar(value)
        if scalar is None or scalar == "":
            continue
        fields[str(key)] = scalar
    return fields


async def fetch_all_records(source: RecordSource) -> list[Record]:
    """Fetch every page of *source*, strictly one after another.

    Each request depends on the previous response's continuation token.
    Nothing is returned until the last page has arrived, so an error
    mid-sequence propagates without yielding a partial set.

    Args:
        source: The record source to read.

    Returns:
        All records in source order.

    Raises:
        TransportFailure: If any page request fails.
    """
    records: list[Record] = []
    token: str | None = None
    page_number = 0

    while True:
        page = await source.fetch_page(token)
        page_number += 1
        records.extend(page.records)
        logger.debug(
            "record_page_fetched",
            source=source.name,
            page=page_number,
            count=len(page.records),
        )
        token = page.continuation_token
        if not token:
            break

    logger.info("record_source_exhausted", source=source.name, pages=page_number, count=len(records))
    return records
