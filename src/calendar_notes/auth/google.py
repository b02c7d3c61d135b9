"""Google OAuth authentication.

Implements the OAuth 2.0 authorization code flow for an installed
application reading the user's calendar.

## Required Setup

1. Create a project in Google Cloud Console
2. Enable the Google Calendar API
3. Create OAuth 2.0 credentials (Desktop app)
4. Download the client-secret JSON and save it as `credentials.json`

## OAuth Endpoints

- Authorization: https://accounts.google.com/o/oauth2/v2/auth
- Token: https://oauth2.googleapis.com/token

## Scopes Used

- https://www.googleapis.com/auth/calendar.readonly: Read calendar data
- https://www.googleapis.com/auth/userinfo.email: Get user's email address
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx
from pydantic import BaseModel

from calendar_notes.errors import AuthError

logger = logging.getLogger(__name__)

# Google OAuth endpoints
GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"

# Treat tokens this close to expiry as already expired
EXPIRY_SKEW = timedelta(seconds=60)


@dataclass(frozen=True)
class ClientCredentials:
    """OAuth client registration from the Google client-secret file."""

    client_id: str
    client_secret: str
    redirect_uri: str
    auth_uri: str = GOOGLE_AUTHORIZE_URL
    token_uri: str = GOOGLE_TOKEN_URL

    @classmethod
    def from_client_config(cls, data: dict[str, Any]) -> ClientCredentials:
        """Create from a client-secret JSON document.

        Google nests the values under "installed" for desktop clients and
        under "web" for web clients.

        Raises:
            KeyError: If a required field is missing
        """
        section = data.get("installed") or data.get("web")
        if not isinstance(section, dict):
            raise KeyError("installed")

        redirect_uris = section["redirect_uris"]
        if not redirect_uris:
            raise KeyError("redirect_uris")

        return cls(
            client_id=section["client_id"],
            client_secret=section["client_secret"],
            redirect_uri=redirect_uris[0],
            auth_uri=section.get("auth_uri", GOOGLE_AUTHORIZE_URL),
            token_uri=section.get("token_uri", GOOGLE_TOKEN_URL),
        )


class GoogleTokens(BaseModel):
    """OAuth tokens from Google, as persisted in the token file."""

    access_token: str
    refresh_token: str | None = None
    token_type: str = "Bearer"
    expires_at: datetime | None = None
    scope: str = ""

    @property
    def is_expired(self) -> bool:
        """Check whether the access token is (about to be) expired."""
        if self.expires_at is None:
            return False
        return datetime.now(timezone.utc) >= self.expires_at - EXPIRY_SKEW

    @classmethod
    def from_token_response(
        cls,
        data: dict[str, Any],
        previous_refresh_token: str | None = None,
    ) -> GoogleTokens:
        """Create from the token endpoint's JSON response."""
        expires_at = None
        if "expires_in" in data:
            expires_at = datetime.now(timezone.utc).replace(
                microsecond=0
            ) + timedelta(seconds=int(data["expires_in"]))

        return cls(
            access_token=data["access_token"],
            # Google may not return a new refresh token
            refresh_token=data.get("refresh_token", previous_refresh_token),
            token_type=data.get("token_type", "Bearer"),
            expires_at=expires_at,
            scope=data.get("scope", ""),
        )


class GoogleOAuth:
    """Google OAuth 2.0 client for the authorization code grant.

    Example:
        ```python
        oauth = GoogleOAuth(client, scopes)

        # Generate authorization URL and show it to the user
        auth_url = oauth.get_authorization_url()

        # Exchange the code the user pasted back
        tokens = await oauth.exchange_code(code)
        ```
    """

    def __init__(
        self,
        client: ClientCredentials,
        scopes: list[str],
        timeout: float = 30.0,
    ):
        """Initialize Google OAuth client.

        Args:
            client: OAuth client registration
            scopes: OAuth scopes to request
            timeout: HTTP timeout in seconds
        """
        self.client = client
        self.scopes = scopes
        self.timeout = timeout

    def get_authorization_url(
        self,
        state: str | None = None,
        access_type: str = "offline",
        prompt: str = "consent",
    ) -> str:
        """Generate the Google OAuth authorization URL.

        Args:
            state: Optional state parameter for CSRF protection
            access_type: "offline" to get refresh token
            prompt: "consent" to always show consent screen

        Returns:
            URL the user must open to grant access
        """
        params = {
            "client_id": self.client.client_id,
            "redirect_uri": self.client.redirect_uri,
            "response_type": "code",
            "scope": " ".join(self.scopes),
            "access_type": access_type,
            "prompt": prompt,
        }
        if state:
            params["state"] = state

        return str(httpx.URL(self.client.auth_uri, params=params))

    async def exchange_code(self, code: str) -> GoogleTokens:
        """Exchange authorization code for tokens.

        Args:
            code: Authorization code pasted by the user

        Returns:
            GoogleTokens with access and refresh tokens

        Raises:
            AuthError: If token exchange fails
        """
        data = await self._post_token(
            {
                "client_id": self.client.client_id,
                "client_secret": self.client.client_secret,
                "code": code,
                "grant_type": "authorization_code",
                "redirect_uri": self.client.redirect_uri,
            },
            action="Token exchange",
        )
        return GoogleTokens.from_token_response(data)

    async def refresh_access_token(self, refresh_token: str) -> GoogleTokens:
        """Refresh an expired access token.

        Args:
            refresh_token: The refresh token

        Returns:
            New GoogleTokens (refresh_token may be the same)

        Raises:
            AuthError: If refresh fails
        """
        data = await self._post_token(
            {
                "client_id": self.client.client_id,
                "client_secret": self.client.client_secret,
                "refresh_token": refresh_token,
                "grant_type": "refresh_token",
            },
            action="Token refresh",
        )
        return GoogleTokens.from_token_response(
            data, previous_refresh_token=refresh_token
        )

    async def _post_token(self, form: dict[str, str], action: str) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.client.token_uri, data=form)
        except httpx.HTTPError as e:
            raise AuthError(f"{action} failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"{action} failed: {response.text}")
            raise AuthError(
                f"{action} failed: {response.status_code}",
                status_code=response.status_code,
            )

        return response.json()
