"""Session controller owning all mutable outreach state.

``OutreachSession`` holds the record store, filter state, selection,
pagination cursor, chat transcript and the single current campaign.  Every
user action is a method here.  Derived views are recomputed synchronously
whenever their inputs change; the record import and the generation calls
are coroutines gated by an in-flight flag so at most one of each runs at a
time.

Domain errors are caught at this boundary and turned into user-visible
state: ``session.error`` (the banner) and, for chat and generation, an
error-flagged assistant turn in the transcript.
"""

from __future__ import annotations

from typing import Any

import structlog
from anthropic import AsyncAnthropic

from outreach.dispatch.base import MailDispatcher, build_dispatch_request
from outreach.domain.errors import (
    ConfigIncomplete,
    DispatchPreconditionFailure,
    NoRecipientsResolved,
    OutreachError,
)
from outreach.domain.models import (
    Campaign,
    CampaignContext,
    ConversationTurn,
    FilterState,
    Recipient,
    Record,
)
from outreach.domain.types import CampaignState, TurnRole
from outreach.llm.client import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    GENERATION_MODEL,
    MAX_RECIPIENTS_FOR_PROMPT,
    MAX_RECORDS_FOR_CONTEXT,
)
from outreach.llm.context import build_campaign_context
from outreach.llm.generation import request_campaign, request_chat_reply
from outreach.llm.parser import parse_campaign_response
from outreach.llm.prompts import (
    CAMPAIGN_READY_REPLY,
    CHAT_ERROR_REPLY,
    GENERATION_ERROR_REPLY,
    NO_RECIPIENTS_REPLY,
)
from outreach.recipients.resolver import names_mentioned_in, resolve_recipients
from outreach.records.fields import DEFAULT_ALIASES, FieldAliases
from outreach.records.filtering import apply_filters
from outreach.records.pagination import DEFAULT_PAGE_SIZE, Page, clamp_page, paginate
from outreach.records.selection import SelectionSet
from outreach.records.store import RecordStore
from outreach.sources.base import RecordSource, fetch_all_records
from outreach.state_machine import CampaignEvent, CampaignLifecycle

logger = structlog.get_logger()


class OutreachSession:
    """Explicit owner of the record set, view state, transcript and campaign.

    Args:
        source: Record source used by ``import_records``.
        source_missing: Settings that kept a source from being built, named
            in the import error when ``source`` is ``None``.
        generation_client: Async Anthropic client for chat and generation.
        dispatcher: Mail-dispatch collaborator.
        aliases: Field alias lists for names, emails and the context
            allow-list.
        page_size: Records per page.
        filtered_cap: Cap on the filtered sample sent to the model.
        selected_cap: Cap on the selected sample sent to the model.
        recipient_sample_cap: Cap on recipients listed in the generation
            prompt.
        model: Anthropic model id.
        temperature: Sampling temperature for generation calls.
        max_tokens: Maximum tokens per generation call.
    """

    def __init__(
        self,
        *,
        source: RecordSource | None = None,
        source_missing: list[str] | None = None,
        generation_client: AsyncAnthropic | None = None,
        dispatcher: MailDispatcher | None = None,
        aliases: FieldAliases = DEFAULT_ALIASES,
        page_size: int = DEFAULT_PAGE_SIZE,
        filtered_cap: int = MAX_RECORDS_FOR_CONTEXT,
        selected_cap: int = MAX_RECORDS_FOR_CONTEXT,
        recipient_sample_cap: int = MAX_RECIPIENTS_FOR_PROMPT,
        model: str = GENERATION_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> None:
        self.source = source
        self._source_missing = list(source_missing or [])
        self.generation_client = generation_client
        self.dispatcher = dispatcher
        self._aliases = aliases
        self._page_size = page_size
        self._filtered_cap = filtered_cap
        self._selected_cap = selected_cap
        self._recipient_sample_cap = recipient_sample_cap
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

        self._store = RecordStore()
        self._filter_state = FilterState()
        self._filtered: list[Record] = []
        self._selection = SelectionSet()
        self._page = 1
        self._transcript: list[ConversationTurn] = []
        self._lifecycle = CampaignLifecycle()
        self._campaign: Campaign | None = None

        self.error: str | None = None
        self.is_importing = False
        self.is_generating = False

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def store(self) -> RecordStore:
        return self._store

    @property
    def filter_state(self) -> FilterState:
        return self._filter_state

    @property
    def filtered_view(self) -> list[Record]:
        """The current filtered view (a copy)."""
        return list(self._filtered)

    @property
    def available_filters(self) -> list[str]:
        return self._store.field_names

    @property
    def selected_ids(self) -> list[str]:
        return self._selection.ids

    @property
    def current_page(self) -> Page:
        return paginate(self._filtered, self._page, self._page_size)

    @property
    def transcript(self) -> list[ConversationTurn]:
        return list(self._transcript)

    @property
    def campaign(self) -> Campaign | None:
        return self._campaign

    @property
    def campaign_state(self) -> CampaignState:
        return self._lifecycle.state

    def get_record(self, record_id: str) -> Record | None:
        """Return the full record for the detail view, if present."""
        return self._store.get(record_id)

    # ------------------------------------------------------------------
    # Filtering and pagination
    # ------------------------------------------------------------------

    def _refilter(self) -> None:
        self._filtered = apply_filters(self._store, self._filter_state)
        self._page = 1

    def set_search_term(self, term: str) -> None:
        self._filter_state = self._filter_state.with_search_term(term)
        self._refilter()

    def set_field_filter(self, field_name: str, pattern: str) -> None:
        self._filter_state = self._filter_state.with_field_filter(field_name, pattern)
        self._refilter()

    def clear_filters(self) -> None:
        """Drop the search term and every field filter."""
        self._filter_state = FilterState()
        self._refilter()

    def go_to_page(self, page: int) -> Page:
        """Move to *page*, clamped into the valid range."""
        self._page = clamp_page(page, len(self._filtered), self._page_size)
        return self.current_page

    def next_page(self) -> Page:
        return self.go_to_page(self._page + 1)

    def previous_page(self) -> Page:
        return self.go_to_page(self._page - 1)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def toggle_selection(self, record_id: str) -> bool:
        return self._selection.toggle(record_id)

    def select_all_filtered(self) -> None:
        """Select exactly the records of the current filtered view."""
        self._selection.select_all(self._filtered)

    def deselect_all(self) -> None:
        self._selection.clear()

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------

    async def import_records(self) -> bool:
        """Replace the record store with a fresh import from the source.

        The store is swapped only after the last page arrives; on failure
        the previous store stays as it was.

        Returns:
            ``True`` if the store was replaced.
        """
        if self.is_importing:
            logger.warning("action_already_in_flight", action="import")
            return False

        if self.source is None:
            missing = self._source_missing or ["record source connection"]
            self.error = str(ConfigIncomplete(missing))
            return False

        self.is_importing = True
        self.error = None
        try:
            records = await fetch_all_records(self.source)
        except OutreachError as exc:
            self.error = str(exc)
            logger.warning("record_import_failed", source=self.source.name, error=str(exc))
            return False
        finally:
            self.is_importing = False

        self._store = RecordStore(records)
        self._selection.clear()
        self._refilter()
        logger.info("records_imported", source=self.source.name, count=len(records))
        return True

    # ------------------------------------------------------------------
    # Context and recipients
    # ------------------------------------------------------------------

    def build_context(self) -> CampaignContext:
        """Bounded snapshot of the filtered and selected records."""
        return build_campaign_context(
            self._filtered,
            self._selection.ids,
            total_record_count=len(self._store),
            filtered_cap=self._filtered_cap,
            selected_cap=self._selected_cap,
            aliases=self._aliases,
        )

    def resolve_recipients(self, prompt: str | None = None) -> list[Recipient]:
        """Resolve recipients from the selection, or from names in *prompt*."""
        return resolve_recipients(
            self._store.records,
            self._selection.ids,
            self._filtered,
            prompt,
            aliases=self._aliases,
        )

    # ------------------------------------------------------------------
    # Chat
    # ------------------------------------------------------------------

    def _append(self, role: TurnRole, content: str, *, is_error: bool = False) -> ConversationTurn:
        turn = ConversationTurn(role=role, content=content, is_error=is_error)
        self._transcript.append(turn)
        return turn

    def _require_generation_client(self) -> AsyncAnthropic:
        if self.generation_client is None:
            raise ConfigIncomplete(["Anthropic API key"])
        return self.generation_client

    async def send_chat_message(self, text: str) -> ConversationTurn | None:
        """Send a free-form question about the records to the model.

        Returns:
            The assistant turn appended to the transcript, or ``None`` if
            the message was blank, blocked by missing configuration, or
            another call was in flight.
        """
        message = text.strip()
        if not message:
            return None
        if self.is_generating:
            logger.warning("action_already_in_flight", action="chat")
            return None
        try:
            client = self._require_generation_client()
        except ConfigIncomplete as exc:
            self.error = str(exc)
            return None

        history = list(self._transcript)
        self._append(TurnRole.USER, message)
        self.is_generating = True
        self.error = None
        try:
            reply = await request_chat_reply(
                client,
                self.build_context(),
                history,
                message,
                model=self._model,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except OutreachError as exc:
            self.error = str(exc)
            logger.warning("chat_failed", error=str(exc))
            return self._append(
                TurnRole.ASSISTANT, CHAT_ERROR_REPLY.format(detail=exc), is_error=True
            )
        finally:
            self.is_generating = False

        return self._append(TurnRole.ASSISTANT, reply)

    def clear_transcript(self) -> None:
        self._transcript.clear()

    # ------------------------------------------------------------------
    # Campaign lifecycle
    # ------------------------------------------------------------------

    async def generate_campaign(self, prompt: str) -> Campaign | None:
        """Generate a campaign for the resolved recipients.

        With no resolved recipients the request is rejected before the
        lifecycle leaves its current state.  On success the campaign keeps
        the full recipient list, not the sample shown to the model.  A
        previewed campaign is replaced only when the new one parses; after
        a failure it is restored once the failure is acknowledged.

        Returns:
            The new current campaign, or ``None`` if generation did not
            happen or failed.
        """
        instructions = prompt.strip()
        if not instructions:
            return None
        if self.is_generating:
            logger.warning("action_already_in_flight", action="generate_campaign")
            return None
        try:
            client = self._require_generation_client()
        except ConfigIncomplete as exc:
            self.error = str(exc)
            return None

        self._append(TurnRole.USER, instructions)

        recipients = self.resolve_recipients(instructions)
        if not recipients:
            self.error = str(NoRecipientsResolved())
            self._append(TurnRole.ASSISTANT, NO_RECIPIENTS_REPLY, is_error=True)
            logger.info("campaign_generation_rejected", reason="no_recipients")
            return None

        if self._lifecycle.is_terminal:
            self._campaign = None
        self._lifecycle.prepare_generation(has_preview=self._campaign is not None)
        self._lifecycle.trigger(CampaignEvent.START_GENERATION)
        self.is_generating = True
        self.error = None
        try:
            raw_text = await request_campaign(
                client,
                instructions,
                recipients,
                names_mentioned_in(self._filtered, instructions, self._aliases),
                sample_cap=self._recipient_sample_cap,
                model=self._model,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
            draft = parse_campaign_response(raw_text)
        except OutreachError as exc:
            self._lifecycle.trigger(CampaignEvent.GENERATION_FAILED)
            self.error = str(exc)
            self._append(
                TurnRole.ASSISTANT, GENERATION_ERROR_REPLY.format(detail=exc), is_error=True
            )
            logger.warning("campaign_generation_failed", error=str(exc))
            return None
        except Exception:
            self._lifecycle.trigger(CampaignEvent.GENERATION_FAILED)
            logger.exception("campaign_generation_crashed")
            raise
        finally:
            self.is_generating = False

        self._campaign = Campaign.from_draft(draft, recipients)
        self._lifecycle.trigger(CampaignEvent.GENERATION_SUCCEEDED)
        self._append(TurnRole.ASSISTANT, CAMPAIGN_READY_REPLY)
        logger.info("campaign_generated", recipient_count=len(recipients))
        return self._campaign

    def acknowledge_failure(self) -> None:
        """Clear the banner and leave FAILED.

        A failed regeneration returns to the campaign that was being
        previewed; otherwise the lifecycle returns to NO_CAMPAIGN.
        """
        self.error = None
        if self._lifecycle.state == CampaignState.FAILED:
            self._lifecycle.settle_failure(has_preview=self._campaign is not None)

    def dismiss_campaign(self) -> None:
        """Discard the previewed campaign."""
        if self._lifecycle.state != CampaignState.PREVIEW_READY:
            return
        self._lifecycle.trigger(CampaignEvent.DISMISS)
        self._campaign = None

    async def dispatch_campaign(self) -> dict[str, Any] | None:
        """Hand the previewed campaign to the mail-dispatch collaborator.

        Returns:
            The dispatcher's result, or ``None`` if the hand-off was
            rejected or failed (see ``error``).
        """
        try:
            if self._lifecycle.state != CampaignState.PREVIEW_READY:
                raise DispatchPreconditionFailure("No email campaign to send.")
            request = build_dispatch_request(self._campaign)
            if self.dispatcher is None:
                raise ConfigIncomplete(["mail dispatcher"])
            result = await self.dispatcher.dispatch(request)
        except OutreachError as exc:
            self.error = str(exc)
            logger.warning("campaign_dispatch_failed", error=str(exc))
            return None

        self._lifecycle.trigger(CampaignEvent.DISPATCH)
        logger.info(
            "campaign_dispatched",
            dispatcher=self.dispatcher.name,
            recipient_count=len(request.recipient_emails),
        )
        return result
