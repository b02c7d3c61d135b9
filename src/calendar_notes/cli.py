"""Command-line interface for calendar notes."""

import argparse
import asyncio
import logging
import sys

from calendar_notes import __version__
from calendar_notes.config import get_settings
from calendar_notes.errors import CalendarNotesError, ConfigMissing
from calendar_notes.sync import (
    COMMAND_NAME,
    create_credential_provider,
    create_sync_service,
)


async def _sync() -> int:
    service = create_sync_service(get_settings())
    async with service.host:
        result = await service.run()

    if result.rejected:
        return 1
    if not result.success:
        print(f"Sync failed: {result.error}", file=sys.stderr)
        return 1

    print(
        f"Inserted {result.events_inserted} of {result.events_found} events"
        + (f", skipped {len(result.skipped_templates)}" if result.skipped_templates else "")
    )
    return 0


async def _auth() -> int:
    provider = create_credential_provider(get_settings())
    try:
        await provider.obtain_context()
    except ConfigMissing as e:
        print(str(e), file=sys.stderr)
        return 2
    except CalendarNotesError as e:
        print(f"Authorization failed: {e}", file=sys.stderr)
        return 1

    print(f"Token stored at {provider.token_store.path}")
    return 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Calendar Notes - Insert today's Google Calendar events into your notes"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("sync", help=COMMAND_NAME)
    subparsers.add_parser(
        "auth", help="Authorize access to Google Calendar and store the token"
    )

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    settings = get_settings()
    logging.basicConfig(
        level=settings.effective_log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "auth":
        return asyncio.run(_auth())
    return asyncio.run(_sync())


if __name__ == "__main__":
    sys.exit(main())
