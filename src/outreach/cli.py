"""Command-line interface for the outreach engine.

Each invocation imports the record set, applies the requested search,
filters and selection, then runs one action.

Usage::

    python -m outreach.cli configure --api-key pat... --base-id app... --table Clients
    python -m outreach.cli records --search acme --filter City=Boston --page 2
    python -m outreach.cli chat "How many clients are in Boston?"
    python -m outreach.cli campaign "Invite Tina Cheng to our spring launch" --send
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Sequence
from typing import Any

from pydantic import SecretStr

from outreach.app import configure_logging, initialize_services
from outreach.domain.models import Campaign, Record, stringify_value
from outreach.records.pagination import Page
from outreach.session import OutreachSession
from outreach.sources.airtable import AirtableProfile
from outreach.state.config_store import ConfigStore, close_config_db


def _add_view_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--search", type=str, default="", help="Search across all fields")
    parser.add_argument(
        "--filter",
        action="append",
        default=[],
        metavar="FIELD=PATTERN",
        help="Substring filter on one field (repeatable)",
    )
    parser.add_argument(
        "--select",
        action="append",
        default=[],
        metavar="RECORD_ID",
        help="Explicitly select a record (repeatable)",
    )
    parser.add_argument(
        "--select-all",
        action="store_true",
        help="Select every record in the filtered view",
    )


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser.

    Returns:
        A configured :class:`argparse.ArgumentParser`.
    """
    parser = argparse.ArgumentParser(description="Client outreach campaigns")
    parser.add_argument(
        "--production",
        action="store_true",
        help="JSON logs at INFO instead of console logs at DEBUG",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    configure = subparsers.add_parser("configure", help="Save connection settings")
    configure.add_argument("--api-key", type=str, help="Airtable API key")
    configure.add_argument("--base-id", type=str, help="Airtable base ID")
    configure.add_argument("--table", type=str, help="Airtable table name")
    configure.add_argument("--anthropic-key", type=str, help="Anthropic API key")

    records = subparsers.add_parser("records", help="List a page of the filtered records")
    _add_view_arguments(records)
    records.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    records.add_argument(
        "--format",
        type=str,
        choices=["table", "json"],
        default="table",
        dest="output_format",
        help="Output format (default: table)",
    )

    chat = subparsers.add_parser("chat", help="Ask a question about the records")
    _add_view_arguments(chat)
    chat.add_argument("message", type=str)

    campaign = subparsers.add_parser("campaign", help="Generate an email campaign")
    _add_view_arguments(campaign)
    campaign.add_argument("prompt", type=str)
    campaign.add_argument(
        "--send",
        action="store_true",
        help="Hand the generated campaign to the mail dispatcher",
    )

    return parser


def parse_filter(spec: str) -> tuple[str, str]:
    """Split ``FIELD=PATTERN``.

    Raises:
        ValueError: If there is no ``=`` or the field name is empty.
    """
    field_name, sep, pattern = spec.partition("=")
    if not sep or not field_name.strip():
        raise ValueError(f"Invalid filter {spec!r}; expected FIELD=PATTERN")
    return field_name.strip(), pattern


def apply_view_arguments(session: OutreachSession, args: argparse.Namespace) -> None:
    """Apply --search/--filter/--select/--select-all to *session*."""
    if args.search:
        session.set_search_term(args.search)
    for spec in args.filter:
        session.set_field_filter(*parse_filter(spec))
    if args.select_all:
        session.select_all_filtered()
    for record_id in args.select:
        if record_id not in session.selected_ids:
            session.toggle_selection(record_id)


def format_page(page: Page, columns: Sequence[str], selected: Sequence[str] = ()) -> str:
    """Format a page of records as a table.

    Long cells are truncated to keep rows within terminal width.
    """
    if not page.items:
        return "No results found."

    width = 24

    def truncate(value: str) -> str:
        if len(value) > width:
            return value[: width - 3] + "..."
        return value

    headers = ["", "ID", *columns]
    lines = ["  ".join(truncate(h).ljust(width if h else 1) for h in headers)]
    lines.append("-" * len(lines[0]))
    for record in page.items:
        mark = "*" if record.id in selected else " "
        cells = [record.id, *(record.value_text(c) for c in columns)]
        lines.append("  ".join([mark, *(truncate(c).ljust(width) for c in cells)]))
    lines.append(f"Page {page.number} of {page.page_count} ({page.total_items} records)")
    return "\n".join(lines)


def _record_json(record: Record) -> dict[str, Any]:
    return {"id": record.id, "fields": {k: stringify_value(v) for k, v in record.fields.items()}}


def format_campaign(campaign: Campaign) -> str:
    """Format a campaign preview as JSON."""
    return json.dumps(
        {
            "subject": campaign.subject,
            "previewText": campaign.preview_text,
            "bodyText": campaign.body_text,
            "bodyHtml": campaign.body_html,
            "recipients": [
                {"name": r.display_name, "email": r.email} for r in campaign.recipients
            ],
        },
        indent=2,
    )


def run_configure(store: ConfigStore, args: argparse.Namespace) -> int:
    """Merge the given settings into the saved configuration."""
    current = store.load_source_profile() or AirtableProfile()
    if args.api_key or args.base_id or args.table:
        profile = AirtableProfile(
            api_key=SecretStr(args.api_key) if args.api_key else current.api_key,
            base_id=args.base_id or current.base_id,
            table_name=args.table or current.table_name,
        )
        store.save_source_profile(profile)
        print("Saved record source settings.")
    if args.anthropic_key:
        store.save_generation_credential(args.anthropic_key)
        print("Saved Anthropic API key.")
    return 0


async def run_session_command(session: OutreachSession, args: argparse.Namespace) -> int:
    """Import records, apply the view arguments, then run the command."""
    if not await session.import_records():
        print(f"Error: {session.error}", file=sys.stderr)
        return 1

    apply_view_arguments(session, args)

    if args.command == "records":
        page = session.go_to_page(args.page)
        if args.output_format == "json":
            print(json.dumps([_record_json(r) for r in page.items], indent=2))
        else:
            print(format_page(page, session.available_filters[:4], session.selected_ids))
        return 0

    if args.command == "chat":
        turn = await session.send_chat_message(args.message)
        if turn is None or turn.is_error:
            print(f"Error: {session.error}", file=sys.stderr)
            return 1
        print(turn.content)
        return 0

    campaign = await session.generate_campaign(args.prompt)
    if campaign is None:
        print(f"Error: {session.error}", file=sys.stderr)
        return 1
    print(format_campaign(campaign))

    if args.send:
        result = await session.dispatch_campaign()
        if result is None:
            print(f"Error: {session.error}", file=sys.stderr)
            return 1
        print(f"Dispatched to {len(campaign.recipients)} recipients.")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments and run one command."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(production=args.production)

    try:
        services = initialize_services()
    except FileNotFoundError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        if args.command == "configure":
            return run_configure(services["config_store"], args)
        try:
            return asyncio.run(run_session_command(services["session"], args))
        except ValueError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 2
    finally:
        close_config_db(services["config_conn"])


if __name__ == "__main__":
    sys.exit(main())
