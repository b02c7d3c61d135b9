"""Domain models for calendar notes."""

from calendar_notes.models.event import (
    EventRecord,
    Page,
    TemplateBlock,
    TemplateCategory,
)

__all__ = [
    "EventRecord",
    "Page",
    "TemplateBlock",
    "TemplateCategory",
]
