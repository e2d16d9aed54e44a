"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# Settings are read from two sources (in priority order):
#
#   1. **Environment variables** -- e.g., SETLIST_FM_KEY=abc123
#   2. **.env file** -- key=value lines in the project root .env file
#
# Field `setlist_fm_key` maps to env var `SETLIST_FM_KEY` automatically.
# Defaults below apply when neither source defines the field.
#
# The setlist.fm key is never read from the process environment by the
# provider itself: main.py passes it to SetlistFmProvider explicitly, so
# tests construct providers with a stub key (or none at all).
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """ticketStub application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Setlist listing API ===
    # Empty string = "not configured" → search and detail lookups degrade
    # to failed(not_configured) outcomes instead of calling upstream.
    setlist_fm_key: str = ""
    setlist_fm_base_url: str = "https://api.setlist.fm/rest/1.0"
    http_timeout: float = 10.0

    # === Export ===
    export_dpi: int = 300
    ticket_width_mm: float = 200.0
    ticket_height_mm: float = 56.6

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"

    def get_available_providers(self) -> list[str]:
        """Return the names of listing providers that have credentials configured."""
        providers: list[str] = []
        if self.setlist_fm_key:
            providers.append("setlistfm")
        return providers
