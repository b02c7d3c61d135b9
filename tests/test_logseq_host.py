"""Tests for the Logseq HTTP API host."""

import json

import httpx
import pytest

from calendar_notes.errors import HostError
from calendar_notes.host.base import MessageSeverity
from calendar_notes.host.logseq import LogseqHost, strip_properties
from calendar_notes.models.event import Page, TemplateBlock


def make_host(handler, token: str | None = "secret") -> tuple[LogseqHost, list[dict]]:
    """Create a host whose requests go to `handler`; returns recorded calls."""
    calls: list[dict] = []

    def record(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        calls.append({"body": body, "headers": request.headers, "url": str(request.url)})
        return handler(body)

    host = LogseqHost(base_url="http://127.0.0.1:12315/", token=token)
    host._client = httpx.AsyncClient(transport=httpx.MockTransport(record))
    return host, calls


class TestStripProperties:
    """Tests for removing property lines."""

    def test_removes_property_lines(self):
        """Test property lines are removed and content kept."""
        content = "template:: 1:1\ntemplate-including-parent:: false\n{{time}} with {{attendees}}"
        assert strip_properties(content) == "{{time}} with {{attendees}}"

    def test_keeps_plain_content(self):
        """Test content without properties is unchanged."""
        assert strip_properties("Notes: {{summary}}") == "Notes: {{summary}}"


class TestLogseqHost:
    """Tests for the LogseqHost class."""

    @pytest.mark.asyncio
    async def test_request_format(self):
        """Test calls POST the method and args with the bearer token."""
        host, calls = make_host(lambda body: httpx.Response(200, json=None))

        await host.call("logseq.App.getUserConfigs", 1, "two")
        await host.close()

        assert calls[0]["url"] == "http://127.0.0.1:12315/api"
        assert calls[0]["body"] == {"method": "logseq.App.getUserConfigs", "args": [1, "two"]}
        assert calls[0]["headers"]["Authorization"] == "Bearer secret"

    @pytest.mark.asyncio
    async def test_current_page(self):
        """Test the current page is mapped to a Page."""
        host, calls = make_host(
            lambda body: httpx.Response(
                200, json={"uuid": "page-1", "name": "jun 15th, 2024", "originalName": "Jun 15th, 2024"}
            )
        )

        page = await host.get_current_page()

        assert page == Page(id="page-1", name="Jun 15th, 2024")
        assert calls[0]["body"]["method"] == "logseq.Editor.getCurrentPage"

    @pytest.mark.asyncio
    async def test_no_current_page(self):
        """Test a null response means no page is open."""
        host, _ = make_host(lambda body: httpx.Response(200, json=None))
        assert await host.get_current_page() is None

    @pytest.mark.asyncio
    async def test_list_templates(self):
        """Test template blocks are found and their properties stripped."""
        rows = [
            [{"content": "template:: 1:1\n{{time}} {{summary}}", "properties": {"template": "1:1"}}],
            [{"content": "status:: done", "properties": {"status": "done"}}],
            [{"content": "template:: Empty", "properties": {"template": "Empty"}}],
        ]
        host, calls = make_host(lambda body: httpx.Response(200, json=rows))

        templates = await host.list_templates()

        assert templates == [
            TemplateBlock(name="1:1", content="{{time}} {{summary}}"),
            TemplateBlock(name="Empty", content=""),
        ]
        assert calls[0]["body"]["method"] == "logseq.DB.datascriptQuery"

    @pytest.mark.asyncio
    async def test_insert_block_as_child(self):
        """Test blocks are inserted as children of the page."""
        host, calls = make_host(lambda body: httpx.Response(200, json={"uuid": "b1"}))

        await host.insert_block("page-1", "10:00 Standup")

        assert calls[0]["body"] == {
            "method": "logseq.Editor.insertBlock",
            "args": ["page-1", "10:00 Standup", {"sibling": False}],
        }

    @pytest.mark.asyncio
    async def test_show_message(self):
        """Test messages carry the severity as Logseq status."""
        host, calls = make_host(lambda body: httpx.Response(200))

        await host.show_message("Template 'x' not found.", MessageSeverity.WARNING)

        assert calls[0]["body"]["args"] == ["Template 'x' not found.", "warning"]

    @pytest.mark.asyncio
    async def test_http_error(self):
        """Test error statuses raise HostError."""
        host, _ = make_host(lambda body: httpx.Response(401, text="unauthorized"))

        with pytest.raises(HostError) as exc_info:
            await host.get_current_page()

        assert exc_info.value.status_code == 401
        assert exc_info.value.method == "logseq.Editor.getCurrentPage"

    @pytest.mark.asyncio
    async def test_error_payload(self):
        """Test an error object in the response raises HostError."""
        host, _ = make_host(lambda body: httpx.Response(200, json={"error": "MethodNotExist"}))

        with pytest.raises(HostError):
            await host.list_templates()

    @pytest.mark.asyncio
    async def test_unreachable(self):
        """Test connection failures raise HostError."""

        def refuse(body):
            raise httpx.ConnectError("connection refused")

        host, _ = make_host(refuse)

        with pytest.raises(HostError):
            await host.get_current_page()

    @pytest.mark.asyncio
    async def test_context_manager_closes_client(self):
        """Test leaving the context closes the HTTP client."""
        host, _ = make_host(lambda body: httpx.Response(200, json=None))

        async with host:
            await host.get_current_page()

        assert host._client is None
