"""Application configuration.

Configuration is loaded from environment variables (and an optional `.env`
file) using pydantic-settings. OAuth client secrets live in the Google
client-secret JSON file, not in the environment.

## Optional Environment Variables

- GOOGLE_CREDENTIALS_PATH: Google OAuth client-secret JSON (default: credentials.json)
- GOOGLE_TOKEN_PATH: Where the access/refresh token pair is stored (default: token.json)
- CALENDAR_ID: Calendar to read (default: primary)
- CALENDAR_TIMEZONE: IANA timezone for "today" (default: system local time)
- LOGSEQ_API_URL: Logseq HTTP API server (default: http://127.0.0.1:12315)
- LOGSEQ_API_TOKEN: Authorization token configured in Logseq
- TEMPLATE_EXTERNAL / TEMPLATE_INTERNAL / TEMPLATE_ONE_ON_ONE: Template names
- LOG_LEVEL: Logging level (default: INFO)
- DEBUG: Enable debug logging (default: false)

## Example .env file

```
LOGSEQ_API_TOKEN=your-logseq-api-token
TEMPLATE_ONE_ON_ONE=1:1
CALENDAR_TIMEZONE=Europe/Berlin
```
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from calendar_notes.models.event import TemplateCategory

DEFAULT_TEMPLATE_EXTERNAL = "External Meeting Template"
DEFAULT_TEMPLATE_INTERNAL = "Internal Meeting Template"
DEFAULT_TEMPLATE_ONE_ON_ONE = "One-on-One Meeting Template"


class TemplateBindings(BaseModel):
    """Template name to use for each meeting category."""

    model_config = {"frozen": True}

    external: str = Field(
        default=DEFAULT_TEMPLATE_EXTERNAL,
        description="Template for External Meetings",
    )
    internal: str = Field(
        default=DEFAULT_TEMPLATE_INTERNAL,
        description="Template for Internal Meetings (Group)",
    )
    one_on_one: str = Field(
        default=DEFAULT_TEMPLATE_ONE_ON_ONE,
        description="Template for 1:1 Meetings",
    )

    def template_name(self, category: TemplateCategory) -> str:
        """Get the configured template name for a category."""
        if category == TemplateCategory.EXTERNAL:
            return self.external
        if category == TemplateCategory.ONE_ON_ONE:
            return self.one_on_one
        return self.internal


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Google OAuth
    google_credentials_path: Path = Field(
        default=Path("credentials.json"),
        description="Google OAuth client-secret JSON downloaded from Cloud Console",
    )
    google_token_path: Path = Field(
        default=Path("token.json"),
        description="File where the access/refresh token pair is persisted",
    )
    google_scopes: list[str] = Field(
        default=[
            "https://www.googleapis.com/auth/calendar.readonly",
            "https://www.googleapis.com/auth/userinfo.email",
        ],
        description="Google OAuth scopes",
    )

    # Google Calendar API
    calendar_id: str = "primary"
    calendar_timezone: str | None = Field(
        default=None,
        description="IANA timezone defining 'today' (system local time if unset)",
    )

    # Logseq HTTP API server
    logseq_api_url: str = "http://127.0.0.1:12315"
    logseq_api_token: str | None = None
    logseq_timeout: float = Field(default=10.0, gt=0)

    # Templates
    template_external: str = DEFAULT_TEMPLATE_EXTERNAL
    template_internal: str = DEFAULT_TEMPLATE_INTERNAL
    template_one_on_one: str = DEFAULT_TEMPLATE_ONE_ON_ONE

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lowercase level names."""
        return v.upper() if isinstance(v, str) else v

    @field_validator("calendar_timezone")
    @classmethod
    def validate_timezone(cls, v: str | None) -> str | None:
        """Ensure the timezone name is known to zoneinfo."""
        if v is None:
            return v
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @property
    def template_bindings(self) -> TemplateBindings:
        """Template names per meeting category."""
        return TemplateBindings(
            external=self.template_external,
            internal=self.template_internal,
            one_on_one=self.template_one_on_one,
        )

    @property
    def timezone(self) -> ZoneInfo | None:
        """Timezone for 'today', or None for system local time."""
        if self.calendar_timezone is None:
            return None
        return ZoneInfo(self.calendar_timezone)

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are loaded once and cached. To reload, clear the cache:
    ```python
    get_settings.cache_clear()
    ```
    """
    return Settings()


def get_settings_uncached() -> Settings:
    """Get fresh settings without caching.

    Useful for testing when environment variables change.
    """
    return Settings()
