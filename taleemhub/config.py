"""TaleemHub configuration system using Pydantic Settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TaleemHubConfig(BaseSettings):
    """Main configuration class. Loads from .env file and environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "TaleemHub"
    debug: bool = False
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173"

    # Database
    database_url: str = "sqlite:///./taleemhub.db"

    # Key-value storage for personalization
    storage_backend: str = "sql"  # memory / file / sql
    storage_file_path: str = "data/storage.json"
    guest_user_id: str = "guest"
    dashboard_store_max_entries: int = 1000  # in-process stores kept per identity
    dashboard_store_ttl: float = 1800.0  # idle seconds before a store is dropped

    # Notifications
    app_origin: str = "http://localhost:5173"
    default_click_url: str = "/dashboard"
    notification_event_timeout: float = 10.0  # seconds before an event is abandoned

    # Logging
    log_dir: str = "logs"
    log_max_bytes: int = 10_000_000
    log_backup_count: int = 5

    @field_validator("storage_backend")
    @classmethod
    def validate_storage_backend(cls, v: str) -> str:
        allowed = {"memory", "file", "sql"}
        v = v.lower()
        if v not in allowed:
            raise ValueError(f"storage_backend must be one of {allowed}")
        return v

    @field_validator("dashboard_store_max_entries")
    @classmethod
    def validate_store_max_entries(cls, v: int) -> int:
        if v < 1:
            raise ValueError("dashboard_store_max_entries must be at least 1")
        return v

    @field_validator("notification_event_timeout")
    @classmethod
    def validate_event_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("notification_event_timeout must be positive")
        return v

    @property
    def base_dir(self) -> Path:
        return Path(__file__).resolve().parent.parent


def get_config() -> TaleemHubConfig:
    """Factory function to create config instance."""
    return TaleemHubConfig()
