"""Application configuration via environment variables.

All settings are loaded from environment variables (or .env file) using
Pydantic BaseSettings. Absent integration settings disable the integration
rather than raising.
"""

from __future__ import annotations

from functools import lru_cache
from urllib.parse import urlparse

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the LexFlow data layer."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Remote table service ---
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_rest_path: str = "/rest/v1"

    # --- Google Calendar ---
    google_client_id: str = ""
    google_calendar_api_url: str = "https://www.googleapis.com/calendar/v3"
    google_calendar_scope: str = "https://www.googleapis.com/auth/calendar.events"

    # --- Local durable storage ---
    local_storage_url: str = "sqlite:///lexflow.db"
    storage_key_prefix: str = "lexflow_"

    # --- HTTP ---
    http_timeout: float = 30.0

    # --- Logging ---
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def remote_backend_configured(self) -> bool:
        """True when both the table service URL and key are present and usable."""
        if not self.supabase_url or not self.supabase_anon_key:
            return False
        parsed = urlparse(self.supabase_url)
        return parsed.scheme in ("http", "https") and bool(parsed.netloc)

    @property
    def calendar_configured(self) -> bool:
        return bool(self.google_client_id)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached application settings singleton."""
    return Settings()
