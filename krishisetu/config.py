"""
Configuration management using Pydantic Settings.
Challenge: Centralized config, env validation, type safety.
Design: Single source of truth for all environment variables (DB credentials,
identity-service credential, listening port).
"""

import base64
import binascii
import json
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment. Validates at startup."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Krishi-Setu API"
    debug: bool = False
    log_level: str = "INFO"
    port: int = 5000

    # Database: explicit URL wins, otherwise built from DB_USER / DB_PASS
    database_url: str | None = None
    db_user: str = "app"
    db_pass: str = "secret"
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "krishi_setu"
    db_command_timeout_seconds: float = 10.0
    db_pool_timeout_seconds: float = 10.0

    # Firebase identity service. FB_SERVICE_KEY is the base64-encoded service account JSON.
    fb_service_key: str | None = None
    firebase_project_id: str | None = None
    google_certs_url: str = (
        "https://www.googleapis.com/robot/v1/metadata/x509/securetoken@system.gserviceaccount.com"
    )
    identity_timeout_seconds: float = 5.0

    # Listings
    listing_page_size: int = 50

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_pass}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @property
    def service_account(self) -> dict | None:
        """Decoded service account JSON, or None when FB_SERVICE_KEY is unset."""
        if not self.fb_service_key:
            return None
        try:
            return json.loads(base64.b64decode(self.fb_service_key).decode("utf-8"))
        except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
            raise ValueError("FB_SERVICE_KEY is not valid base64-encoded JSON") from exc

    @property
    def resolved_project_id(self) -> str | None:
        if self.firebase_project_id:
            return self.firebase_project_id
        account = self.service_account
        return account.get("project_id") if account else None


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance. Avoids re-reading env on every request (performance)."""
    return Settings()
