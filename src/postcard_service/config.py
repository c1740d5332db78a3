"""Application configuration."""

import os

from pydantic import ValidationError as SettingsValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from postcard_service.errors import ConfigurationError

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    sendblue_api_key: str = ""
    sendblue_api_secret: str = ""
    sendblue_from_number: str = "+14152005823"
    sendblue_base_url: str = "https://api.sendblue.co/api"
    supabase_url: str
    supabase_service_key: str
    postcards_table: str = "postcards"
    postcard_images_bucket: str = "postcards"
    admin_token: str
    default_sender_name: str = "A friend"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def load_settings() -> Settings:
    """Load settings from the environment, raising ConfigurationError if invalid."""
    try:
        return Settings()
    except SettingsValidationError as exc:
        missing = ", ".join(str(error["loc"][0]) for error in exc.errors())
        raise ConfigurationError(f"Invalid or missing settings: {missing}") from exc


def validate_messaging_credentials(settings: Settings) -> None:
    """Refuse to start without Sendblue credentials."""
    missing = [
        name
        for name, value in (
            ("SENDBLUE_API_KEY", settings.sendblue_api_key),
            ("SENDBLUE_API_SECRET", settings.sendblue_api_secret),
        )
        if not value.strip()
    ]
    if missing:
        raise ConfigurationError(
            f"Sendblue API credentials not configured: {', '.join(missing)}"
        )
