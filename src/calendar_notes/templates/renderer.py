"""Template lookup and placeholder substitution.

## Placeholders

| Placeholder       | Value                            |
|-------------------|----------------------------------|
| `{{time}}`        | Start time, HH:MM                |
| `{{summary}}`     | Event title                      |
| `{{description}}` | Event description                |
| `{{location}}`    | Event location                   |
| `{{attendees}}`   | Attendee emails joined by ", "   |
| `{{organizer}}`   | Organizer email                  |
| `{{event_link}}`  | Link to the event in the calendar|

Matching is literal and case-sensitive. Unknown placeholders are left as
they are. Substitution is a single pass, so values containing placeholder
text are inserted verbatim.
"""

from __future__ import annotations

import re
from typing import Iterable

from calendar_notes.config import TemplateBindings
from calendar_notes.errors import TemplateNotFound
from calendar_notes.models.event import EventRecord, TemplateBlock, TemplateCategory


PLACEHOLDERS = (
    "time",
    "summary",
    "description",
    "location",
    "attendees",
    "organizer",
    "event_link",
)

_PLACEHOLDER_RE = re.compile(
    r"\{\{(" + "|".join(re.escape(name) for name in PLACEHOLDERS) + r")\}\}"
)


def placeholder_values(event: EventRecord) -> dict[str, str]:
    """Get the substitution value of every placeholder for an event."""
    return {
        "time": event.time,
        "summary": event.summary,
        "description": event.description,
        "location": event.location,
        "attendees": ", ".join(event.attendees),
        "organizer": event.organizer,
        "event_link": event.event_link,
    }


def fill_template(content: str, event: EventRecord) -> str:
    """Replace every known placeholder in `content` with the event's values."""
    values = placeholder_values(event)
    return _PLACEHOLDER_RE.sub(lambda m: values[m.group(1)], content)


class TemplateRenderer:
    """Renders events with the template bound to their category.

    Example:
        ```python
        renderer = TemplateRenderer(settings.template_bindings, templates)
        content = renderer.render(TemplateCategory.ONE_ON_ONE, event)
        ```
    """

    def __init__(self, bindings: TemplateBindings, templates: Iterable[TemplateBlock]):
        """Initialize the renderer.

        Args:
            bindings: Template name per category
            templates: Templates defined in the notes host
        """
        self.bindings = bindings
        self._templates: dict[str, str] = {}
        for template in templates:
            # First definition wins, like a linear search would
            self._templates.setdefault(template.name, template.content)

    def template_content(self, category: TemplateCategory) -> str:
        """Get the raw content of the template bound to a category.

        Raises:
            TemplateNotFound: If no template has the configured name
        """
        name = self.bindings.template_name(category)
        try:
            return self._templates[name]
        except KeyError:
            raise TemplateNotFound(name) from None

    def render(self, category: TemplateCategory, event: EventRecord) -> str:
        """Render an event with its category's template.

        Raises:
            TemplateNotFound: If no template has the configured name
        """
        return fill_template(self.template_content(category), event)
