"""Today's events from Google Calendar, filtered and flattened.

## Filtering

Applied in order to the raw API events:
1. Drop cancelled events
2. Drop events without a start time of day (all-day events)
3. Drop events the user declined (other attendees declining doesn't matter)

## Mapping

Each remaining event becomes an `EventRecord`. Missing description,
location and organizer become empty strings; a missing attendee list
becomes an empty tuple.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Any, Callable, Iterable
from urllib.parse import quote

from google.auth.exceptions import RefreshError, TransportError
from google.oauth2.credentials import Credentials
from googleapiclient.errors import HttpError

from calendar_notes.auth.credentials import AuthContext
from calendar_notes.calendar.google_calendar import GoogleCalendarClient
from calendar_notes.errors import AuthError, FetchError
from calendar_notes.models.event import EventRecord

logger = logging.getLogger(__name__)

EVENT_LINK_URL = "https://www.google.com/calendar/event?eid={eid}"

# Characters encodeURIComponent leaves alone besides letters, digits and "-_."
_EID_SAFE = "!~*'()"


@dataclass(frozen=True)
class FetchedEvents:
    """Events for today together with the user they were fetched for."""

    user_email: str
    events: list[EventRecord]


def local_midnight(day: date, tz: tzinfo | None = None) -> datetime:
    """Get the instant a day starts in `tz` (system local time if None)."""
    midnight = datetime.combine(day, time.min)
    if tz is None:
        # Resolves the offset in effect at that wall time, not the current one
        return midnight.astimezone()
    return midnight.replace(tzinfo=tz)


def day_bounds(day: date, tz: tzinfo | None = None) -> tuple[datetime, datetime]:
    """Get the first and last millisecond of a local day.

    Each bound gets its own UTC offset, so days with a daylight saving
    switch are 23 or 25 hours long.
    """
    start = local_midnight(day, tz)
    end = local_midnight(day + timedelta(days=1), tz) - timedelta(milliseconds=1)
    return start, end


def event_link(event_id: str) -> str:
    """Build the Google Calendar link for an event id."""
    return EVENT_LINK_URL.format(eid=quote(event_id, safe=_EID_SAFE))


def is_cancelled(event: dict[str, Any]) -> bool:
    return event.get("status") == "cancelled"


def has_start_time(event: dict[str, Any]) -> bool:
    return bool((event.get("start") or {}).get("dateTime"))


def declined_by(event: dict[str, Any], user_email: str) -> bool:
    """Check whether the user's own attendee entry is declined."""
    for attendee in event.get("attendees") or []:
        if (attendee.get("email") or "").lower() == user_email.lower():
            return attendee.get("responseStatus") == "declined"
    return False


def filter_events(
    events: Iterable[dict[str, Any]], user_email: str
) -> list[dict[str, Any]]:
    """Keep timed, non-cancelled events the user hasn't declined."""
    kept = [e for e in events if not is_cancelled(e)]
    kept = [e for e in kept if has_start_time(e)]
    return [e for e in kept if not declined_by(e, user_email)]


def to_event_record(event: dict[str, Any], tz: tzinfo | None = None) -> EventRecord:
    """Flatten a raw API event.

    Args:
        event: Event resource with a `start.dateTime`
        tz: Timezone for the displayed time (system local time if None)
    """
    start = datetime.fromisoformat(event["start"]["dateTime"].replace("Z", "+00:00"))

    return EventRecord(
        time=start.astimezone(tz).strftime("%H:%M"),
        summary=event.get("summary") or "(No title)",
        description=event.get("description") or "",
        location=event.get("location") or "",
        attendees=tuple(
            a["email"] for a in event.get("attendees") or [] if a.get("email")
        ),
        organizer=(event.get("organizer") or {}).get("email") or "",
        event_link=event_link(event["id"]),
    )


class CalendarFetcher:
    """Fetches today's events for the authenticated user.

    Example:
        ```python
        fetcher = CalendarFetcher(calendar_id="primary")
        fetched = await fetcher.fetch_todays_events(ctx)
        for event in fetched.events:
            ...
        ```
    """

    def __init__(
        self,
        calendar_id: str = "primary",
        tz: tzinfo | None = None,
        client_factory: Callable[[Credentials], GoogleCalendarClient] = GoogleCalendarClient,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the fetcher.

        Args:
            calendar_id: Calendar to read
            tz: Timezone defining "today" (system local time if None)
            client_factory: Builds the API client from credentials
            clock: Returns the current time (for tests)
        """
        self.calendar_id = calendar_id
        self.tz = tz
        self._client_factory = client_factory
        self._clock = clock

    def _now(self) -> datetime:
        if self._clock is not None:
            return self._clock().astimezone(self.tz)
        if self.tz is not None:
            return datetime.now(self.tz)
        return datetime.now().astimezone()

    async def fetch_todays_events(self, ctx: AuthContext) -> FetchedEvents:
        """Fetch, filter and flatten today's events.

        Raises:
            FetchError: If the userinfo or events API fails
            AuthError: If google-auth cannot refresh the access token
        """
        time_min, time_max = day_bounds(self._now().date(), self.tz)

        try:
            client = self._client_factory(ctx.google_credentials())
            user_email = await asyncio.to_thread(client.get_user_email)
            items = await asyncio.to_thread(
                client.list_events, self.calendar_id, time_min, time_max
            )
        except RefreshError as e:
            raise AuthError(f"Access token refresh rejected: {e}") from e
        except HttpError as e:
            raise FetchError(
                f"Google API request failed: {e}", status_code=e.resp.status
            ) from e
        except (TransportError, OSError) as e:
            raise FetchError(f"Google API request failed: {e}") from e

        kept = filter_events(items, user_email)
        logger.info(
            f"Fetched {len(items)} events for {time_min.date()}, "
            f"{len(kept)} after filtering"
        )

        return FetchedEvents(
            user_email=user_email,
            events=[to_event_record(e, self.tz) for e in kept],
        )
