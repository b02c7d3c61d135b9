"""Google authentication.

Loads the OAuth client registration, keeps the access/refresh token pair in
a JSON file, and runs the authorization code flow when no usable token
exists.

## Components

- `GoogleOAuth`: authorization URL, code exchange and token refresh
- `TokenStore`: token file persistence
- `CredentialProvider`: decides between stored, refreshed and new tokens
- `CodeReceiver`: gets the authorization code back from the user
"""

from calendar_notes.auth.code_receiver import (
    CodeReceiver,
    ConsoleCodeReceiver,
    extract_code,
)
from calendar_notes.auth.credentials import (
    AuthContext,
    CredentialProvider,
    TokenStore,
    load_client_credentials,
)
from calendar_notes.auth.google import (
    ClientCredentials,
    GoogleOAuth,
    GoogleTokens,
)

__all__ = [
    "AuthContext",
    "ClientCredentials",
    "CodeReceiver",
    "ConsoleCodeReceiver",
    "CredentialProvider",
    "GoogleOAuth",
    "GoogleTokens",
    "TokenStore",
    "extract_code",
    "load_client_credentials",
]
