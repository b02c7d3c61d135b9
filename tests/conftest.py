"""Pytest fixtures for calendar notes tests.

This module provides test fixtures that ensure:
1. No external API calls are made (Google APIs, Logseq HTTP API)
2. Credential and token files live in a temporary directory
3. Isolated test environment with controlled configuration
"""

import json
import os
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

# Set test environment BEFORE importing application modules
os.environ.setdefault("LOGSEQ_API_TOKEN", "test-logseq-token")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from calendar_notes.auth.google import GoogleTokens
from calendar_notes.config import TemplateBindings
from calendar_notes.host.base import NotesHost
from calendar_notes.models.event import EventRecord, Page, TemplateBlock


# =============================================================================
# Test Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset settings cache before each test to ensure clean state."""
    from calendar_notes.config import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def mock_httpx_client():
    """Mock httpx client to prevent any external HTTP calls."""
    with patch("httpx.AsyncClient") as mock_client:
        mock_instance = AsyncMock()
        mock_instance.get = AsyncMock()
        mock_instance.post = AsyncMock()
        mock_instance.__aenter__ = AsyncMock(return_value=mock_instance)
        mock_instance.__aexit__ = AsyncMock(return_value=None)
        mock_client.return_value = mock_instance
        yield mock_instance


def token_response(status_code: int = 200, **data) -> MagicMock:
    """Build a fake token endpoint response."""
    response = MagicMock()
    response.status_code = status_code
    response.text = json.dumps(data)
    response.json.return_value = data
    return response


# =============================================================================
# Credential Fixtures
# =============================================================================


@pytest.fixture
def client_secret_data() -> dict:
    """Client-secret document as downloaded from Google Cloud Console."""
    return {
        "installed": {
            "client_id": "test-client-id.apps.googleusercontent.com",
            "client_secret": "test-client-secret",
            "redirect_uris": ["http://localhost"],
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
        }
    }


@pytest.fixture
def credentials_file(tmp_path: Path, client_secret_data: dict) -> Path:
    """Client-secret file on disk."""
    path = tmp_path / "credentials.json"
    path.write_text(json.dumps(client_secret_data))
    return path


@pytest.fixture
def token_path(tmp_path: Path) -> Path:
    """Location of the token file (not created)."""
    return tmp_path / "token.json"


@pytest.fixture
def stored_tokens() -> GoogleTokens:
    """A token pair that is still valid."""
    return GoogleTokens(
        access_token="stored-access-token",
        refresh_token="stored-refresh-token",
        expires_at="2999-01-01T00:00:00Z",
        scope="https://www.googleapis.com/auth/calendar.readonly",
    )


# =============================================================================
# Event Fixtures
# =============================================================================


@pytest.fixture
def one_on_one_event() -> EventRecord:
    """A one-on-one with a colleague."""
    return EventRecord(
        time="09:30",
        summary="Weekly 1:1",
        description="Career chat",
        location="Room 4",
        attendees=("me@co.com", "x@co.com"),
        organizer="me@co.com",
        event_link="https://www.google.com/calendar/event?eid=abc",
    )


@pytest.fixture
def group_event() -> EventRecord:
    """An internal group meeting."""
    return EventRecord(
        time="11:00",
        summary="Team sync",
        attendees=("me@co.com", "a@co.com", "b@co.com"),
        organizer="a@co.com",
        event_link="https://www.google.com/calendar/event?eid=def",
    )


@pytest.fixture
def external_event() -> EventRecord:
    """A meeting with someone outside the company."""
    return EventRecord(
        time="15:00",
        summary="Vendor call",
        location="https://meet.example.com/xyz",
        attendees=("me@co.com", "ext@other.com"),
        organizer="ext@other.com",
        event_link="https://www.google.com/calendar/event?eid=ghi",
    )


def api_event(
    event_id: str,
    start: str | None = "2024-06-15T09:30:00+00:00",
    attendees: list[dict] | None = None,
    **extra,
) -> dict:
    """Build a Google Calendar API event resource."""
    event = {
        "id": event_id,
        "status": "confirmed",
        "summary": f"Event {event_id}",
        "start": {"dateTime": start} if start else {"date": "2024-06-15"},
        "end": {"dateTime": start} if start else {"date": "2024-06-16"},
    }
    if attendees is not None:
        event["attendees"] = attendees
    event.update(extra)
    return event


# =============================================================================
# Template / Host Fixtures
# =============================================================================


@pytest.fixture
def bindings() -> TemplateBindings:
    """Default template bindings."""
    return TemplateBindings()


@pytest.fixture
def templates() -> list[TemplateBlock]:
    """Templates for all three default bindings."""
    return [
        TemplateBlock(
            name="External Meeting Template",
            content="{{time}} {{summary}} (external with {{attendees}})",
        ),
        TemplateBlock(
            name="Internal Meeting Template",
            content="{{time}} {{summary}} (team)",
        ),
        TemplateBlock(
            name="One-on-One Meeting Template",
            content="{{time}} 1:1 {{summary}} [[{{organizer}}]]",
        ),
    ]


@pytest.fixture
def mock_host(templates: list[TemplateBlock]) -> MagicMock:
    """Mock notes host with an open page and the default templates."""
    host = MagicMock(spec=NotesHost)
    host.get_current_page = AsyncMock(return_value=Page(id="page-uuid", name="Jun 15th, 2024"))
    host.list_templates = AsyncMock(return_value=templates)
    host.insert_block = AsyncMock(return_value=None)
    host.show_message = AsyncMock(return_value=None)
    return host


@pytest.fixture
def make_api_event():
    """Factory for Google Calendar API event resources."""
    return api_event


@pytest.fixture
def make_token_response():
    """Factory for fake token endpoint responses."""
    return token_response
