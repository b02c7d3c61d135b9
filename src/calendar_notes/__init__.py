"""Insert today's Google Calendar events into a notes page.

Each event becomes one block rendered from a template chosen by meeting
type: external, internal group, or one-on-one.
"""

__version__ = "0.1.0"
