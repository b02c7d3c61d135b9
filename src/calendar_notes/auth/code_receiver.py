"""Ways of getting an authorization code back from the user.

The OAuth flow only needs `request_code(auth_url) -> code`; how the code is
obtained (console prompt, local callback server, UI dialog) is up to the
receiver.
"""

from __future__ import annotations

import asyncio
import logging
import webbrowser
from abc import ABC, abstractmethod
from typing import Callable

import httpx

from calendar_notes.errors import AuthError

logger = logging.getLogger(__name__)


class CodeReceiver(ABC):
    """Obtains an OAuth authorization code for a given authorization URL."""

    @abstractmethod
    async def request_code(self, auth_url: str) -> str:
        """Send the user to `auth_url` and return the code they obtained."""
        pass


def extract_code(value: str) -> str:
    """Get the authorization code from user input.

    Accepts either the bare code or the full URL the browser was redirected
    to, in which case the `code` query parameter is used.
    """
    value = value.strip()
    if "://" in value:
        code = httpx.URL(value).params.get("code")
        if code:
            return code
    return value


class ConsoleCodeReceiver(CodeReceiver):
    """Opens the authorization URL in a browser and reads the code from stdin.

    Waits without a timeout: this only runs once, in the foreground, when no
    stored token exists.
    """

    prompt = "Enter the code from that page here: "

    def __init__(
        self,
        open_browser: bool = True,
        input_func: Callable[[str], str] = input,
        print_func: Callable[[str], None] = print,
    ):
        self.open_browser = open_browser
        self._input = input_func
        self._print = print_func

    async def request_code(self, auth_url: str) -> str:
        self._print(f"Authorize this app by visiting this url: {auth_url}")

        if self.open_browser and not webbrowser.open(auth_url):
            logger.warning("Could not open a browser; open the URL manually")

        answer = await asyncio.to_thread(self._input, self.prompt)
        code = extract_code(answer)
        if not code:
            raise AuthError("No authorization code entered")
        return code
