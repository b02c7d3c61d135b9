"""Note-taking tools events are inserted into.

## Supported Hosts

### Logseq
- Endpoint: http://127.0.0.1:12315/api (HTTP APIs server in the desktop app)
- Auth: Bearer token configured in Logseq
"""

from calendar_notes.host.base import MessageSeverity, NotesHost
from calendar_notes.host.logseq import LogseqHost

__all__ = [
    "LogseqHost",
    "MessageSeverity",
    "NotesHost",
]
