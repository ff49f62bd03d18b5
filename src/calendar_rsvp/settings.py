"""
Application settings with environment variable support.

All settings can be overridden via GCAL_RSVP_* environment variables.
A Settings instance is created once by the CLI and passed down, so
tests can point paths at a temporary directory.
"""

import os
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


APP_NAME = "google-calendar-rsvp"

# Read-write access to events. Requested on get as well as patch so the
# user is only asked to authorize once.
EVENTS_SCOPE = "https://www.googleapis.com/auth/calendar.events"


def default_data_dir() -> Path:
    """Get data directory: $XDG_DATA_HOME/google-calendar-rsvp"""
    data_home = os.getenv("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / APP_NAME
    return Path.home() / ".local" / "share" / APP_NAME


class Settings(BaseSettings):
    """Google Calendar RSVP configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GCAL_RSVP_",
        env_file=".env",
        extra="ignore",
    )

    data_dir: Path = Field(default_factory=default_data_dir)

    calendar_id: str = "primary"
    scopes: list[str] = Field(default_factory=lambda: [EVENTS_SCOPE])

    # Seconds per HTTP request
    http_timeout: float = 30.0
    max_retries: int = 3

    # Send a response without an attendee email when self is not found
    allow_anonymous_patch: bool = False

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"

    def ensure_dirs(self) -> None:
        """Create the data directory if it doesn't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def get_token_path(self) -> Path:
        """Get OAuth token cache path."""
        return self.data_dir / "token.json"

    def get_oauth_secret_path(self) -> Path:
        """Get OAuth application secret path (downloaded from Google Cloud Console)."""
        return self.data_dir / "oauth-secret.json"
