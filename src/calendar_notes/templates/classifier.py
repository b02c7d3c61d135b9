"""Meeting classification by attendee domain and count."""

from __future__ import annotations

from calendar_notes.models.event import EventRecord, TemplateCategory


def email_domain(email: str) -> str:
    """Get the part of an address after the last "@", lowercased."""
    return email.rpartition("@")[2].lower()


def classify(event: EventRecord, user_email: str) -> TemplateCategory:
    """Pick the template category for an event.

    Any attendee outside the user's domain makes the meeting external, even
    when there is only one other attendee. Otherwise exactly one other
    attendee is a one-on-one, and anything else (nobody, or a group) is
    internal.
    """
    me = user_email.lower()
    domain = email_domain(user_email)
    others = [email for email in event.attendees if email.lower() != me]

    if any(email_domain(email) != domain for email in others):
        return TemplateCategory.EXTERNAL
    if len(others) == 1:
        return TemplateCategory.ONE_ON_ONE
    return TemplateCategory.INTERNAL
