"""Tests for getting the authorization code from the user."""

from unittest.mock import patch

import pytest

from calendar_notes.auth.code_receiver import ConsoleCodeReceiver, extract_code
from calendar_notes.errors import AuthError

AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth?client_id=cid"


class TestExtractCode:
    """Tests for parsing pasted input."""

    def test_bare_code(self):
        """Test a bare code is returned trimmed."""
        assert extract_code("  4/0AbCdEf  \n") == "4/0AbCdEf"

    def test_redirect_url(self):
        """Test the code is taken from a pasted redirect URL."""
        pasted = "http://localhost/?code=4/0AbC&scope=email"
        assert extract_code(pasted) == "4/0AbC"

    def test_url_without_code(self):
        """Test a URL without a code parameter is returned as is."""
        assert extract_code("http://localhost/?error=access_denied") == (
            "http://localhost/?error=access_denied"
        )


class TestConsoleCodeReceiver:
    """Tests for the ConsoleCodeReceiver class."""

    @pytest.mark.asyncio
    async def test_prints_url_and_reads_code(self):
        """Test the URL is shown, the browser opened and the code read."""
        printed = []
        prompts = []

        def fake_input(prompt: str) -> str:
            prompts.append(prompt)
            return "the-code\n"

        receiver = ConsoleCodeReceiver(input_func=fake_input, print_func=printed.append)

        with patch("calendar_notes.auth.code_receiver.webbrowser.open", return_value=True) as mock_open:
            code = await receiver.request_code(AUTH_URL)

        assert code == "the-code"
        assert AUTH_URL in printed[0]
        assert prompts == [ConsoleCodeReceiver.prompt]
        mock_open.assert_called_once_with(AUTH_URL)

    @pytest.mark.asyncio
    async def test_browser_disabled(self):
        """Test the browser is not opened when disabled."""
        receiver = ConsoleCodeReceiver(
            open_browser=False,
            input_func=lambda prompt: "code",
            print_func=lambda text: None,
        )

        with patch("calendar_notes.auth.code_receiver.webbrowser.open") as mock_open:
            assert await receiver.request_code(AUTH_URL) == "code"

        mock_open.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_input(self):
        """Test empty input raises AuthError."""
        receiver = ConsoleCodeReceiver(
            open_browser=False,
            input_func=lambda prompt: "   ",
            print_func=lambda text: None,
        )

        with pytest.raises(AuthError):
            await receiver.request_code(AUTH_URL)
