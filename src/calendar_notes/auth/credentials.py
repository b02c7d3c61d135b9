"""Credential provider: client secret, token storage and the OAuth bootstrap.

## Flow

1. Load the OAuth client registration from the client-secret file
2. Load the stored token
   - valid: use it as is
   - expired with a refresh token: refresh and store the new token
   - missing or unreadable: run the authorization code flow and store the result
3. Return an `AuthContext` usable by the Google API client library, which
   refreshes silently on its own while requests are made
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import timezone
from pathlib import Path

from google.oauth2.credentials import Credentials
from pydantic import ValidationError

from calendar_notes.auth.code_receiver import CodeReceiver
from calendar_notes.auth.google import ClientCredentials, GoogleOAuth, GoogleTokens
from calendar_notes.errors import AuthError, ConfigMissing

logger = logging.getLogger(__name__)


def load_client_credentials(path: Path) -> ClientCredentials:
    """Read the Google client-secret file.

    Raises:
        ConfigMissing: If the file is absent, not JSON, or lacks required keys
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigMissing(
            f"Client credentials not found at {path}. Download them from "
            "Google Cloud Console.",
            path=path,
        ) from e
    except (OSError, ValueError) as e:
        raise ConfigMissing(f"Cannot read client credentials at {path}: {e}", path=path) from e

    try:
        return ClientCredentials.from_client_config(data)
    except (KeyError, TypeError, IndexError) as e:
        raise ConfigMissing(
            f"Client credentials at {path} are missing field {e}", path=path
        ) from e


class TokenStore:
    """JSON file holding the access/refresh token pair."""

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> GoogleTokens | None:
        """Load the stored token, or None if absent or unreadable."""
        if not self.path.exists():
            return None
        try:
            return GoogleTokens.model_validate_json(self.path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable token file {self.path}: {e}")
            return None

    def save(self, tokens: GoogleTokens) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(tokens.model_dump_json(indent=2), encoding="utf-8")
        logger.info(f"Token stored to {self.path}")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


@dataclass(frozen=True)
class AuthContext:
    """Authenticated context for Google API calls."""

    client: ClientCredentials
    tokens: GoogleTokens
    scopes: tuple[str, ...] = ()

    def google_credentials(self) -> Credentials:
        """Build credentials for googleapiclient.

        Client id, secret and token URI are included so the library can
        refresh the access token by itself.
        """
        expiry = self.tokens.expires_at
        if expiry is not None and expiry.tzinfo is not None:
            # google-auth compares against naive UTC datetimes
            expiry = expiry.astimezone(timezone.utc).replace(tzinfo=None)

        return Credentials(
            token=self.tokens.access_token,
            refresh_token=self.tokens.refresh_token,
            token_uri=self.client.token_uri,
            client_id=self.client.client_id,
            client_secret=self.client.client_secret,
            scopes=list(self.scopes) or None,
            expiry=expiry,
        )


class CredentialProvider:
    """Obtains an authenticated context, prompting the user if needed.

    Example:
        ```python
        provider = CredentialProvider(
            credentials_path=Path("credentials.json"),
            token_store=TokenStore(Path("token.json")),
            scopes=settings.google_scopes,
            code_receiver=ConsoleCodeReceiver(),
        )
        ctx = await provider.obtain_context()
        ```
    """

    def __init__(
        self,
        credentials_path: Path,
        token_store: TokenStore,
        scopes: list[str],
        code_receiver: CodeReceiver,
    ):
        self.credentials_path = credentials_path
        self.token_store = token_store
        self.scopes = scopes
        self.code_receiver = code_receiver

    def _oauth(self, client: ClientCredentials) -> GoogleOAuth:
        return GoogleOAuth(client, self.scopes)

    async def obtain_context(self) -> AuthContext:
        """Get an authenticated context.

        Raises:
            ConfigMissing: If the client credentials file is absent or invalid
            AuthError: If the token cannot be exchanged or refreshed
        """
        client = load_client_credentials(self.credentials_path)
        oauth = self._oauth(client)

        tokens = self.token_store.load()
        if tokens is None:
            tokens = await self._authorize(oauth)
        elif tokens.is_expired and tokens.refresh_token:
            tokens = await self._refresh(oauth, tokens.refresh_token)

        return AuthContext(client=client, tokens=tokens, scopes=tuple(self.scopes))

    def invalidate(self) -> None:
        """Forget the stored token so the next attempt re-authorizes."""
        logger.info("Discarding stored token")
        self.token_store.clear()

    async def _authorize(self, oauth: GoogleOAuth) -> GoogleTokens:
        auth_url = oauth.get_authorization_url()
        logger.info("No stored token, starting authorization")

        code = await self.code_receiver.request_code(auth_url)
        tokens = await oauth.exchange_code(code)

        self.token_store.save(tokens)
        return tokens

    async def _refresh(self, oauth: GoogleOAuth, refresh_token: str) -> GoogleTokens:
        logger.info("Access token expired, refreshing")
        try:
            tokens = await oauth.refresh_access_token(refresh_token)
        except AuthError:
            self.invalidate()
            raise

        self.token_store.save(tokens)
        return tokens
