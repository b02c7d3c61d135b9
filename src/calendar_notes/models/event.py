"""Event and template models shared by the fetcher, renderer and sync driver."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TemplateCategory(str, Enum):
    """Meeting categories, each bound to one note template."""

    EXTERNAL = "external"
    INTERNAL = "internal"
    ONE_ON_ONE = "one_on_one"


@dataclass(frozen=True)
class EventRecord:
    """A calendar event flattened for template filling.

    Built once per sync from a Google Calendar API event and discarded after
    insertion.
    """

    time: str  # HH:MM in the local day
    summary: str
    description: str = ""
    location: str = ""
    attendees: tuple[str, ...] = field(default_factory=tuple)
    organizer: str = ""
    event_link: str = ""


@dataclass(frozen=True)
class TemplateBlock:
    """A named template defined in the notes host."""

    name: str
    content: str


@dataclass(frozen=True)
class Page:
    """The page currently open in the notes host."""

    id: str
    name: str = ""
