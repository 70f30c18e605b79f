"""Application wiring: logging configuration and session construction.

Configures:
- **structlog** with JSON rendering (production) or colored console (development)
- the **record source** (saved Airtable profile, Airtable env settings, or Google Sheets)
- the **Anthropic client** from the saved credential or ``ANTHROPIC_API_KEY``
- the **mail dispatcher** (Gmail when a sender and token exist, otherwise the mail client)
"""

from __future__ import annotations

import logging
from typing import Any

import structlog

from outreach.config import Settings, get_settings, validate_credentials
from outreach.dispatch.base import MailDispatcher
from outreach.dispatch.mailto import MailtoDispatcher
from outreach.domain.errors import ConfigIncomplete
from outreach.llm.client import get_anthropic_client
from outreach.records.fields import load_field_aliases
from outreach.session import OutreachSession
from outreach.sources.airtable import AirtableProfile, AirtableSource
from outreach.sources.base import RecordSource
from outreach.state.config_store import ConfigStore, init_config_db

logger = structlog.get_logger()


def configure_logging(production: bool = False) -> None:
    """Configure structlog for production (JSON) or development (console).

    Args:
        production: JSON rendering at INFO if ``True``; colored console at
            DEBUG otherwise.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if production:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        log_level = logging.INFO
    else:
        renderer = structlog.dev.ConsoleRenderer()
        log_level = logging.DEBUG

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.bind_contextvars(service="client-outreach")


def resolve_source_profile(settings: Settings, store: ConfigStore) -> AirtableProfile:
    """The saved profile wins; otherwise build one from settings."""
    saved = store.load_source_profile()
    if saved is not None:
        return saved
    return AirtableProfile(
        api_key=settings.airtable_api_key,
        base_id=settings.airtable_base_id,
        table_name=settings.airtable_table_name,
    )


def create_record_source(settings: Settings, store: ConfigStore) -> RecordSource:
    """Pick the record source: Airtable if a profile is complete, else Sheets.

    Raises:
        ConfigIncomplete: Naming the empty Airtable settings when neither
            source can be built.
    """
    profile = resolve_source_profile(settings, store)
    missing = profile.missing_fields()
    if not missing:
        return AirtableSource(profile, page_size=settings.airtable_page_size)

    if settings.google_sheets_key:
        from outreach.sources.sheets import create_sheets_source

        try:
            return create_sheets_source(
                settings.google_sheets_key,
                worksheet_name=settings.sheets_worksheet,
                service_account_path=str(settings.sheets_service_account_path.expanduser()),
            )
        except (OSError, ValueError) as exc:
            logger.warning("sheets_source_unavailable", exc_info=True)
            raise ConfigIncomplete(["Google Sheets service account"]) from exc

    logger.info("record_source_not_configured", missing=missing)
    raise ConfigIncomplete(missing)


def create_dispatcher(settings: Settings) -> MailDispatcher:
    """Gmail when a sender address and token exist, otherwise the mail client."""
    if settings.sender_email and settings.gmail_token_path.exists():
        from outreach.auth.credentials import get_gmail_credentials, get_gmail_service
        from outreach.dispatch.gmail import GmailDispatcher

        try:
            credentials = get_gmail_credentials(
                settings.gmail_token_path, settings.gmail_credentials_path
            )
            return GmailDispatcher(get_gmail_service(credentials), settings.sender_email)
        except ConfigIncomplete:
            logger.warning("gmail_dispatcher_unavailable", exc_info=True)
    return MailtoDispatcher()


def initialize_services(settings: Settings | None = None) -> dict[str, Any]:
    """Set up the configuration store and an ``OutreachSession``.

    Persisted configuration is loaded once here.

    Args:
        settings: Application settings.  If ``None``, ``get_settings()`` is used.

    Returns:
        A dict of initialized service instances keyed by name.
    """
    if settings is None:
        settings = get_settings()

    validate_credentials(settings)
    services: dict[str, Any] = {"settings": settings}

    db_path = settings.config_db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    config_conn = init_config_db(db_path)
    config_store = ConfigStore(config_conn)
    services["config_conn"] = config_conn
    services["config_store"] = config_store

    generation_client = None
    credential = config_store.load_generation_credential() or settings.anthropic_api_key
    if credential.get_secret_value():
        generation_client = get_anthropic_client(credential.get_secret_value())
        logger.info("anthropic_client_initialized")
    else:
        logger.info("anthropic_client_disabled", reason="no API key")

    source: RecordSource | None = None
    source_missing: list[str] = []
    try:
        source = create_record_source(settings, config_store)
    except ConfigIncomplete as exc:
        source_missing = exc.missing

    session = OutreachSession(
        source=source,
        source_missing=source_missing,
        generation_client=generation_client,
        dispatcher=create_dispatcher(settings),
        aliases=load_field_aliases(settings.field_aliases_path),
        page_size=settings.page_size,
        filtered_cap=settings.context_filtered_cap,
        selected_cap=settings.context_selected_cap,
        recipient_sample_cap=settings.recipient_sample_cap,
        model=settings.generation_model,
        temperature=settings.generation_temperature,
        max_tokens=settings.generation_max_tokens,
    )
    services["session"] = session
    return services
