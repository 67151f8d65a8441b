"""
Runtime configuration with graceful degradation.
Provider keys are optional: missing keys switch verticals to demo data
instead of stopping the service.
"""
from __future__ import annotations

import json
import logging
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Constants
PROVIDER_TIMEOUT_SECONDS = 10.0
MAX_REFERENCE_INPUTS = 10
RECENT_WINDOW_DAYS = 30
MIN_API_KEY_LENGTH = 10


class Settings(BaseSettings):
    """
    Application settings.
    Every external provider is optional - research falls back to demo data
    when a provider key is absent.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # OPTIONAL: Songstats (DSP playlists + radio airplay)
    SONGSTATS_API_KEY: str | None = None
    SONGSTATS_BASE_URL: str = "https://api.songstats.com/enterprise/v1"

    # OPTIONAL: 1001Tracklists (DJ sets)
    TRACKLISTS_API_KEY: str | None = None
    TRACKLISTS_BASE_URL: str = "https://api.1001tracklists.com/v1"

    # OPTIONAL: Outbound call behaviour
    PROVIDER_TIMEOUT_SECONDS: float = PROVIDER_TIMEOUT_SECONDS
    PROVIDER_MAX_RETRIES: int = 3
    PROVIDER_RETRY_DELAY_SECONDS: float = 0.5

    # OPTIONAL: Persistence
    STORAGE_DIR: str = "/tmp/campaign_scout"
    GOOGLE_CREDENTIALS: str | None = None  # JSON string of service account credentials
    SHEET_ID: str | None = None

    # OPTIONAL: Application Settings
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "production"
    CORS_ORIGINS: list[str] = []

    @field_validator("SONGSTATS_API_KEY", "TRACKLISTS_API_KEY", "GOOGLE_CREDENTIALS", "SHEET_ID")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Treat empty strings from the environment as unset."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("PROVIDER_MAX_RETRIES")
    @classmethod
    def validate_retries(cls, v: int) -> int:
        if v < 0:
            raise ValueError("PROVIDER_MAX_RETRIES cannot be negative")
        return v

    @model_validator(mode="after")
    def validate_google_credentials_json(self) -> "Settings":
        """Validate that GOOGLE_CREDENTIALS, when present, is a JSON object."""
        if not self.GOOGLE_CREDENTIALS:
            return self
        try:
            credentials_dict = json.loads(self.GOOGLE_CREDENTIALS)
        except json.JSONDecodeError as e:
            raise ValueError(f"GOOGLE_CREDENTIALS is not valid JSON: {e}") from e
        if not isinstance(credentials_dict, dict):
            raise ValueError("GOOGLE_CREDENTIALS must be a JSON object")
        return self

    @property
    def songstats_configured(self) -> bool:
        return bool(self.SONGSTATS_API_KEY)

    @property
    def songstats_key_valid(self) -> bool:
        return bool(self.SONGSTATS_API_KEY) and len(self.SONGSTATS_API_KEY) >= MIN_API_KEY_LENGTH

    @property
    def tracklists_configured(self) -> bool:
        return bool(self.TRACKLISTS_API_KEY)

    def log_startup_summary(self) -> None:
        """Log configuration summary on startup (without leaking secrets)."""
        logger.info("=" * 60)
        logger.info("Campaign Scout - Configuration")
        logger.info("=" * 60)
        logger.info("Environment: %s", self.ENVIRONMENT)
        logger.info("Log Level: %s", self.LOG_LEVEL)
        logger.info("Songstats API Key: %s", "✓ Present" if self.SONGSTATS_API_KEY else "○ Not set (demo data)")
        logger.info("Tracklists API Key: %s", "✓ Present" if self.TRACKLISTS_API_KEY else "○ Not set (demo data)")
        logger.info("Provider timeout: %ss, retries: %s", self.PROVIDER_TIMEOUT_SECONDS, self.PROVIDER_MAX_RETRIES)
        logger.info("Storage Dir: %s", self.STORAGE_DIR)
        logger.info("Google Sheets mirror: %s", "✓ Configured" if self.GOOGLE_CREDENTIALS and self.SHEET_ID else "○ Not configured")
        logger.info("=" * 60)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    settings = Settings()
    settings.log_startup_summary()
    return settings
