"""
Application configuration loaded from environment variables with sensible
defaults for local development.

All settings are validated at startup via Pydantic ``BaseSettings``.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the Mapbox gateway."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -- Application --
    app_name: str = "Mapbox Gateway"
    app_version: str = "0.1.0"
    debug: bool = False

    # -- API --
    api_v1_prefix: str = "/api/v1"

    # -- Mapbox --
    mapbox_access_token: str = ""
    mapbox_base_url: str = "https://api.mapbox.com"
    mapbox_profile: str = "driving"
    mapbox_timeout_seconds: float = 10.0
    mapbox_validate_coordinates: bool = True

    # -- Retry --
    mapbox_max_retries: int = 3
    mapbox_retry_base_delay: float = 0.5  # doubles each retry: 0.5, 1.0, 2.0
    mapbox_retry_max_delay: float = 8.0

    # -- Logging --
    log_level: str = "info"
    log_json: bool = True
    log_dir: str = ""


settings = Settings()
