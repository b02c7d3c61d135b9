"""Google Calendar API client.

Thin wrapper over googleapiclient for the two calls a sync needs:
- Look up the authenticated user's email (OAuth2 v2 userinfo)
- List events in a time window

## API Documentation

https://developers.google.com/calendar/api/v3/reference/events/list

## Authentication

Uses the OAuth 2.0 credentials from the credential provider. Expired access
tokens are refreshed by google-auth while requests are made.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

logger = logging.getLogger(__name__)


class GoogleCalendarClient:
    """Client for Google Calendar API.

    Example:
        ```python
        client = GoogleCalendarClient(ctx.google_credentials())

        email = client.get_user_email()
        items = client.list_events("primary", time_min, time_max)
        ```
    """

    def __init__(self, credentials: Credentials):
        """Initialize the client.

        Args:
            credentials: Authorized google-auth credentials
        """
        self._credentials = credentials

        # Build services
        self._service = build(
            "calendar", "v3", credentials=credentials, cache_discovery=False
        )
        self._oauth2 = build(
            "oauth2", "v2", credentials=credentials, cache_discovery=False
        )

    def get_user_email(self) -> str:
        """Get the email address of the authenticated user."""
        result = self._oauth2.userinfo().get().execute()
        return result["email"]

    def list_events(
        self,
        calendar_id: str,
        time_min: datetime,
        time_max: datetime,
        max_results: int = 250,
    ) -> list[dict[str, Any]]:
        """List events from a calendar, following every result page.

        Recurring events are expanded into single instances and ordered by
        start time.

        Args:
            calendar_id: Calendar ID (use 'primary' for primary calendar)
            time_min: Lower bound (exclusive) for an event's end time
            time_max: Upper bound (exclusive) for an event's start time
            max_results: Maximum events per page

        Returns:
            Raw event resources as returned by the API
        """
        items: list[dict[str, Any]] = []
        page_token = None

        params: dict[str, Any] = {
            "calendarId": calendar_id,
            "timeMin": time_min.isoformat(timespec="milliseconds"),
            "timeMax": time_max.isoformat(timespec="milliseconds"),
            "maxResults": max_results,
            "singleEvents": True,  # Expand recurring events
            "orderBy": "startTime",
        }

        while True:
            if page_token:
                params["pageToken"] = page_token

            result = self._service.events().list(**params).execute()
            items.extend(result.get("items", []))

            page_token = result.get("nextPageToken")
            if not page_token:
                break

        logger.debug(f"Listed {len(items)} events from calendar {calendar_id}")
        return items
