"""Calendar-to-notes synchronization.

Handles one "Sync Google Calendar" run: today's events are inserted into the
page currently open in the notes host, one block per event.

## Sync Process

1. Check that a page is open (no page: do nothing)
2. Authenticate with Google
3. Fetch today's events
4. For each event, in chronological order:
   a. Classify it (external, internal, one-on-one)
   b. Render the bound template (missing template: warn and skip)
   c. Append the result as a child block of the page

Any other failure stops the run and shows one error message. Blocks
already inserted are kept. Nothing is retried; running the command again
is the way to recover.

## Concurrency

A run that starts while another is in progress is rejected with a warning
instead of interleaving insertions.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from calendar_notes.auth.code_receiver import CodeReceiver, ConsoleCodeReceiver
from calendar_notes.auth.credentials import CredentialProvider, TokenStore
from calendar_notes.calendar.fetcher import CalendarFetcher
from calendar_notes.config import Settings, TemplateBindings
from calendar_notes.errors import AuthError, HostError, NoActivePage, TemplateNotFound
from calendar_notes.host.base import MessageSeverity, NotesHost
from calendar_notes.host.logseq import LogseqHost
from calendar_notes.templates.classifier import classify
from calendar_notes.templates.renderer import TemplateRenderer

logger = logging.getLogger(__name__)

COMMAND_NAME = "Sync Google Calendar"
FAILURE_MESSAGE = "Failed to sync calendar. Check logs for details."
BUSY_MESSAGE = "A calendar sync is already running."


class SyncState(str, Enum):
    """Where a sync run currently is."""

    IDLE = "idle"
    AUTHENTICATING = "authenticating"
    FETCHING = "fetching"
    INSERTING = "inserting"
    FAILED = "failed"


@dataclass
class SyncResult:
    """Result of a sync run."""

    page_id: str | None = None
    events_found: int = 0
    events_inserted: int = 0
    skipped_templates: list[str] = field(default_factory=list)
    error: str | None = None
    failed_at: SyncState | None = None
    rejected: bool = False
    synced_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def success(self) -> bool:
        return self.error is None and not self.rejected


class CalendarNotesSync:
    """Runs the sync command.

    Example:
        ```python
        service = CalendarNotesSync(provider, fetcher, host, settings.template_bindings)
        result = await service.run()
        ```
    """

    def __init__(
        self,
        credential_provider: CredentialProvider,
        fetcher: CalendarFetcher,
        host: NotesHost,
        bindings: TemplateBindings,
    ):
        """Initialize the sync service.

        Args:
            credential_provider: Supplies the authenticated Google context
            fetcher: Reads today's events
            host: Notes host to insert into
            bindings: Template name per meeting category
        """
        self.credential_provider = credential_provider
        self.fetcher = fetcher
        self.host = host
        self.bindings = bindings
        self.state = SyncState.IDLE
        self._lock = asyncio.Lock()

    async def run(self) -> SyncResult:
        """Run one sync, reporting failures to the user instead of raising."""
        if self._lock.locked():
            logger.warning("Sync requested while another sync is running")
            await self._notify(BUSY_MESSAGE, MessageSeverity.WARNING)
            return SyncResult(rejected=True)

        async with self._lock:
            result = SyncResult()
            try:
                await self._sync(result)
            except NoActivePage:
                logger.info("No page open, nothing to sync")
            except Exception as e:
                result.failed_at = self.state
                result.error = str(e)
                self.state = SyncState.FAILED
                logger.exception(f"Failed to sync calendar: {e}")

                if isinstance(e, AuthError):
                    self.credential_provider.invalidate()

                await self._notify(FAILURE_MESSAGE, MessageSeverity.ERROR)
            finally:
                self.state = SyncState.IDLE

            return result

    async def _sync(self, result: SyncResult) -> None:
        page = await self.host.get_current_page()
        if page is None:
            raise NoActivePage()
        result.page_id = page.id

        logger.info(f"Syncing today's events into page {page.name or page.id}")

        self.state = SyncState.AUTHENTICATING
        ctx = await self.credential_provider.obtain_context()

        self.state = SyncState.FETCHING
        fetched = await self.fetcher.fetch_todays_events(ctx)
        result.events_found = len(fetched.events)

        self.state = SyncState.INSERTING
        renderer = TemplateRenderer(self.bindings, await self.host.list_templates())

        for event in fetched.events:
            category = classify(event, fetched.user_email)
            try:
                content = renderer.render(category, event)
            except TemplateNotFound as e:
                logger.warning(f"Skipping '{event.summary}': {e}")
                result.skipped_templates.append(e.template_name)
                await self._notify(str(e), MessageSeverity.WARNING)
                continue

            await self.host.insert_block(page.id, content)
            result.events_inserted += 1

        logger.info(
            f"Synced calendar: {result.events_found} found, "
            f"{result.events_inserted} inserted, "
            f"{len(result.skipped_templates)} skipped"
        )

        if result.events_inserted:
            await self._notify(
                f"Inserted {result.events_inserted} calendar event(s).",
                MessageSeverity.SUCCESS,
            )

    async def _notify(self, text: str, severity: MessageSeverity) -> None:
        try:
            await self.host.show_message(text, severity)
        except HostError as e:
            logger.error(f"Could not show message '{text}': {e}")


def create_credential_provider(
    settings: Settings,
    code_receiver: CodeReceiver | None = None,
) -> CredentialProvider:
    """Build the credential provider from settings."""
    return CredentialProvider(
        credentials_path=settings.google_credentials_path,
        token_store=TokenStore(settings.google_token_path),
        scopes=settings.google_scopes,
        code_receiver=code_receiver or ConsoleCodeReceiver(),
    )


def create_sync_service(
    settings: Settings,
    host: NotesHost | None = None,
    code_receiver: CodeReceiver | None = None,
) -> CalendarNotesSync:
    """Wire a sync service from settings.

    Args:
        settings: Application settings
        host: Notes host (Logseq HTTP API by default)
        code_receiver: Authorization code source (console by default)
    """
    if host is None:
        host = LogseqHost(
            base_url=settings.logseq_api_url,
            token=settings.logseq_api_token,
            timeout=settings.logseq_timeout,
        )

    return CalendarNotesSync(
        credential_provider=create_credential_provider(settings, code_receiver),
        fetcher=CalendarFetcher(
            calendar_id=settings.calendar_id,
            tz=settings.timezone,
        ),
        host=host,
        bindings=settings.template_bindings,
    )
