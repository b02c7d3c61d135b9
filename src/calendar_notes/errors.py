"""Exceptions raised while syncing calendar events into notes.

`ConfigMissing`, `AuthError`, `FetchError` and `HostError` abort a sync.
`TemplateNotFound` only skips the affected event. `NoActivePage` is not an
error from the user's point of view: the sync silently does nothing.
"""

from __future__ import annotations

from pathlib import Path


class CalendarNotesError(Exception):
    """Base exception for calendar notes errors."""


class ConfigMissing(CalendarNotesError):
    """Raised when the OAuth client credentials file is absent or invalid."""

    def __init__(self, message: str, path: Path | str | None = None):
        super().__init__(message)
        self.path = path


class AuthError(CalendarNotesError):
    """Raised when a token exchange or refresh fails."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class FetchError(CalendarNotesError):
    """Raised when the userinfo or events API cannot be read."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class TemplateNotFound(CalendarNotesError):
    """Raised when a configured template does not exist in the notes host."""

    def __init__(self, template_name: str):
        super().__init__(f"Template '{template_name}' not found.")
        self.template_name = template_name


class NoActivePage(CalendarNotesError):
    """Raised when no page is open in the notes host."""

    pass


class HostError(CalendarNotesError):
    """Raised when a notes host API call fails."""

    def __init__(
        self,
        message: str,
        method: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.method = method
        self.status_code = status_code
        self.response_body = response_body
