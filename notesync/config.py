"""
Configuration module for the notes client.
Loads environment variables and provides centralized config access.
"""

from pathlib import Path
from pydantic_settings import BaseSettings
from functools import lru_cache

# ============================================================
# Centralized Data Paths
# ============================================================
# All local client data (note cache, saved screen state, session token)
# lives under one directory for easy backup/deletion.
DATA_DIR = Path.home() / ".notesync"

CACHE_DB_NAME = "notes.db"
STATE_FILE_NAME = "state.json"
SESSION_FILE_NAME = "session.json"


class Settings(BaseSettings):
    """
    Client settings loaded from environment variables.
    Uses pydantic-settings for validation and type coercion.
    """

    # ============================================================
    # Remote Service
    # ============================================================
    api_base_url: str = "http://localhost:8000"
    request_timeout: float = 30.0

    # ============================================================
    # Local Storage
    # ============================================================
    data_dir: Path = DATA_DIR

    # ============================================================
    # Logging
    # ============================================================
    log_level: str = "INFO"

    class Config:
        env_prefix = "NOTESYNC_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def cache_db_path(self) -> Path:
        """SQLite file backing the local note cache."""
        return self.data_dir / CACHE_DB_NAME

    @property
    def state_file(self) -> Path:
        """JSON file holding saved screen state (credentials, sort order)."""
        return self.data_dir / STATE_FILE_NAME

    @property
    def session_file(self) -> Path:
        """JSON file holding the signed-in user's session token."""
        return self.data_dir / SESSION_FILE_NAME


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to avoid reloading env vars on every call.
    """
    return Settings()
