"""Pydantic v2 models for the outreach domain.

Records are imported wholesale and never mutated afterwards, so every model
here is frozen.  Derived shapes (``Recipient``, ``CampaignContext``) are
rebuilt on every request rather than stored.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

from outreach.domain.types import TurnRole

Scalar = str | int | float | bool
FieldValue = Scalar | list[Scalar]

# Separator used when a multi-valued field is rendered as text
LIST_SEPARATOR = ", "


def stringify_value(value: object) -> str:
    """Render a field value as text for matching and display.

    Sequences are joined with ``LIST_SEPARATOR``; a missing value renders
    as the empty string.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return LIST_SEPARATOR.join(stringify_value(v) for v in value)
    return str(value)


class Record(BaseModel):
    """One imported entity: an opaque id and an ordered field map."""

    model_config = ConfigDict(frozen=True)

    id: str
    fields: dict[str, FieldValue] = Field(default_factory=dict)

    def value_text(self, field_name: str) -> str:
        """Return the stringified value of *field_name* (empty if absent)."""
        return stringify_value(self.fields.get(field_name))


class FilterState(BaseModel):
    """Search term plus per-field substring filters.

    Only user input changes this state; each change produces a new instance.
    """

    model_config = ConfigDict(frozen=True)

    search_term: str = ""
    field_filters: dict[str, str] = Field(default_factory=dict)

    def with_search_term(self, term: str) -> FilterState:
        """Return a copy with *term* as the search term."""
        return self.model_copy(update={"search_term": term})

    def with_field_filter(self, field_name: str, pattern: str) -> FilterState:
        """Return a copy with *pattern* set as the filter for *field_name*."""
        filters = dict(self.field_filters)
        filters[field_name] = pattern
        return self.model_copy(update={"field_filters": filters})

    @property
    def is_empty(self) -> bool:
        """True when neither a search term nor any field filter is active."""
        return not self.search_term and not any(self.field_filters.values())


class Recipient(BaseModel):
    """A record resolved to a deliverable email plus display name."""

    model_config = ConfigDict(frozen=True)

    email: str
    display_name: str
    source_fields: dict[str, FieldValue] = Field(default_factory=dict)


class SlimRecord(BaseModel):
    """A record reduced to the allow-listed fields sent to the model."""

    model_config = ConfigDict(frozen=True)

    id: str
    fields: dict[str, FieldValue] = Field(default_factory=dict)


class CampaignContext(BaseModel):
    """Bounded snapshot of the record set handed to the generation call.

    Counts are always the true aggregates, so a consumer can tell that the
    samples were truncated.
    """

    model_config = ConfigDict(frozen=True)

    total_record_count: int
    filtered_count: int
    selected_count: int
    selected_ids: list[str] = Field(default_factory=list)
    cap: int
    filtered_sample: list[SlimRecord] = Field(default_factory=list)
    selected_sample: list[SlimRecord] = Field(default_factory=list)

    @property
    def is_truncated(self) -> bool:
        """True when either sample holds fewer records than its count."""
        return (
            len(self.filtered_sample) < self.filtered_count
            or len(self.selected_sample) < self.selected_count
        )


class CampaignDraft(BaseModel):
    """The four fields the generation call must return.

    Field aliases match the JSON keys requested in the system prompt.  All
    four are required strings; nothing is defaulted.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    subject: StrictStr
    preview_text: StrictStr = Field(alias="previewText")
    body_html: StrictStr = Field(alias="bodyHtml")
    body_text: StrictStr = Field(alias="bodyText")


class Campaign(BaseModel):
    """A parsed campaign plus its full, untruncated recipient list."""

    model_config = ConfigDict(frozen=True)

    subject: str
    preview_text: str
    body_html: str
    body_text: str
    recipients: list[Recipient] = Field(default_factory=list)

    @classmethod
    def from_draft(cls, draft: CampaignDraft, recipients: list[Recipient]) -> Campaign:
        """Attach *recipients* to a parsed *draft*."""
        return cls(
            subject=draft.subject,
            preview_text=draft.preview_text,
            body_html=draft.body_html,
            body_text=draft.body_text,
            recipients=list(recipients),
        )

    @property
    def dispatch_body(self) -> str:
        """Plain-text body, falling back to the HTML body when text is empty."""
        return self.body_text or self.body_html


class ConversationTurn(BaseModel):
    """One entry of the append-only chat transcript."""

    model_config = ConfigDict(frozen=True)

    role: TurnRole
    content: str
    is_error: bool = False


class DispatchRequest(BaseModel):
    """What the mail-dispatch collaborator receives."""

    model_config = ConfigDict(frozen=True)

    recipient_emails: list[str]
    subject: str
    body: str

    @field_validator("recipient_emails")
    @classmethod
    def must_have_recipients(cls, v: list[str]) -> list[str]:
        """Reject an empty recipient list."""
        if not v:
            raise ValueError("recipient_emails must not be empty")
        return v
