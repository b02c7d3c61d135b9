"""Logseq notes host.

Talks to the Logseq desktop app through its HTTP APIs server.

## Setup

1. In Logseq, enable Settings > Features > HTTP APIs server
2. Start the server and add an authorization token
3. Set LOGSEQ_API_TOKEN (and LOGSEQ_API_URL if not the default)

## Protocol

Every call is `POST {base_url}/api` with a JSON body
`{"method": "logseq.Editor.getCurrentPage", "args": [...]}` and an
`Authorization: Bearer <token>` header. The response body is the method's
return value as JSON.

## Templates

A template is a block with a `template::` property. Its content is the
block text with property lines removed.
"""

from __future__ import annotations

import logging
import re
from typing import Any

import httpx

from calendar_notes.errors import HostError
from calendar_notes.host.base import MessageSeverity, NotesHost
from calendar_notes.models.event import Page, TemplateBlock

logger = logging.getLogger(__name__)

TEMPLATE_QUERY = """
[:find (pull ?b [*])
 :where
 [?b :block/properties ?p]
 [(get ?p :template)]]
"""

_PROPERTY_LINE_RE = re.compile(r"^[A-Za-z0-9_-]+:: .*$", re.MULTILINE)


def strip_properties(content: str) -> str:
    """Remove `key:: value` property lines from block content."""
    return _PROPERTY_LINE_RE.sub("", content).strip("\n")


class LogseqHost(NotesHost):
    """Logseq HTTP API client.

    Example:
        ```python
        async with LogseqHost(token="secret") as host:
            page = await host.get_current_page()
            await host.insert_block(page.id, "- 10:00 Standup")
        ```
    """

    name = "logseq"

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:12315",
        token: str | None = None,
        timeout: float = 10.0,
    ):
        """Initialize the host.

        Args:
            base_url: Logseq HTTP APIs server address
            token: Authorization token configured in Logseq
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

        if not token:
            logger.warning(
                "Logseq API token not configured. Set LOGSEQ_API_TOKEN."
            )

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    def _get_default_headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def call(self, method: str, *args: Any) -> Any:
        """Invoke a Logseq API method.

        Raises:
            HostError: If the server is unreachable or the call fails
        """
        client = self._get_client()
        logger.debug(f"Calling {method}")

        try:
            response = await client.post(
                f"{self.base_url}/api",
                json={"method": method, "args": list(args)},
                headers=self._get_default_headers(),
            )
        except httpx.HTTPError as e:
            raise HostError(f"Logseq API unreachable: {e}", method=method) from e

        if response.status_code >= 400:
            raise HostError(
                f"Logseq API call failed: {response.status_code}",
                method=method,
                status_code=response.status_code,
                response_body=response.text,
            )

        if not response.content:
            return None

        data = response.json()
        if isinstance(data, dict) and "error" in data:
            raise HostError(
                f"Logseq API call failed: {data['error']}",
                method=method,
                status_code=response.status_code,
                response_body=response.text,
            )
        return data

    async def get_current_page(self) -> Page | None:
        data = await self.call("logseq.Editor.getCurrentPage")
        if not data:
            return None
        return Page(
            id=data["uuid"],
            name=data.get("originalName") or data.get("name", ""),
        )

    async def list_templates(self) -> list[TemplateBlock]:
        rows = await self.call("logseq.DB.datascriptQuery", TEMPLATE_QUERY) or []

        templates = []
        for row in rows:
            block = row[0] if isinstance(row, list) else row
            name = (block.get("properties") or {}).get("template")
            if not name:
                continue
            templates.append(
                TemplateBlock(
                    name=str(name),
                    content=strip_properties(block.get("content", "")),
                )
            )

        logger.debug(f"Found {len(templates)} templates")
        return templates

    async def insert_block(self, page_id: str, content: str) -> None:
        await self.call(
            "logseq.Editor.insertBlock", page_id, content, {"sibling": False}
        )

    async def show_message(self, text: str, severity: MessageSeverity) -> None:
        await self.call("logseq.UI.showMsg", text, severity.value)
