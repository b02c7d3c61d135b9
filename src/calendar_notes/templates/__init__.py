"""Meeting classification and template rendering.

Neither module talks to the notes host: the renderer receives the host's
templates and the configured bindings as plain values.
"""

from calendar_notes.templates.classifier import classify, email_domain
from calendar_notes.templates.renderer import (
    PLACEHOLDERS,
    TemplateRenderer,
    fill_template,
    placeholder_values,
)

__all__ = [
    "PLACEHOLDERS",
    "TemplateRenderer",
    "classify",
    "email_domain",
    "fill_template",
    "placeholder_values",
]
