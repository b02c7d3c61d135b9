"""Notes host abstraction.

The sync driver only needs four things from the note-taking tool: the page
currently open, the user's templates, a way to append a block to a page,
and a way to show a message. Each supported tool implements `NotesHost`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from calendar_notes.models.event import Page, TemplateBlock


class MessageSeverity(str, Enum):
    """Severity of a user-visible message."""

    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class NotesHost(ABC):
    """Abstract base class for note-taking tools.

    Example:
        ```python
        class MyHost(NotesHost):
            name = "my_host"

            async def get_current_page(self):
                ...
        ```
    """

    name: str

    async def __aenter__(self) -> NotesHost:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Release any connections held by the host."""
        pass

    @abstractmethod
    async def get_current_page(self) -> Page | None:
        """Get the page currently open, or None."""
        pass

    @abstractmethod
    async def list_templates(self) -> list[TemplateBlock]:
        """List the user's templates as name/content pairs."""
        pass

    @abstractmethod
    async def insert_block(self, page_id: str, content: str) -> None:
        """Append a block as the last child of a page."""
        pass

    @abstractmethod
    async def show_message(self, text: str, severity: MessageSeverity) -> None:
        """Show a message to the user."""
        pass
