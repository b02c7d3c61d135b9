"""Calendar integration module.

Reads today's events from Google Calendar for the authenticated user.

## Google Calendar API

Uses the Google Calendar API v3:
- https://developers.google.com/calendar/api/v3/reference

## Event Processing

1. Resolve the user's email address
2. List today's events on the primary calendar (recurring events expanded)
3. Drop cancelled, all-day and declined events
4. Flatten the rest into `EventRecord`s
"""

from calendar_notes.calendar.fetcher import (
    CalendarFetcher,
    FetchedEvents,
    day_bounds,
    event_link,
    filter_events,
    to_event_record,
)
from calendar_notes.calendar.google_calendar import GoogleCalendarClient

__all__ = [
    "CalendarFetcher",
    "FetchedEvents",
    "GoogleCalendarClient",
    "day_bounds",
    "event_link",
    "filter_events",
    "to_event_record",
]
