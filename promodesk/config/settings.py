"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ─────────────────────────────────────────────────
#
# pydantic-settings reads configuration from two sources (in priority order):
#
#   1. **Environment variables** — e.g., STORAGE_DB_PATH=/var/lib/promodesk.db
#   2. **.env file** — key=value lines in the project root .env file
#
# Field ``sheets_poll_interval_seconds`` maps to env var
# ``SHEETS_POLL_INTERVAL_SECONDS``.  Defaults apply when neither is set.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """promoDesk application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Storage ===
    # SQLite file backing the per-key collection store.
    storage_db_path: str = "data/promodesk.db"

    # === Sheets submission sync ===
    sheets_poll_interval_seconds: float = 60.0
    sheets_debounce_seconds: float = 30.0
    sheets_timeout_seconds: float = 15.0
    new_data_signal_seconds: float = 2.0

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"
