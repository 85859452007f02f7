"""Application configuration via pydantic-settings.

Loads all settings from environment variables (or .env file).
See .env.example for documented variable names and defaults.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the EventSub bridge."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Twitch EventSub ---
    twitch_event_secret: SecretStr = SecretStr("")

    # --- Discord ---
    discord_webhook_url: str = ""
    notifier_timeout_seconds: float = 10.0

    # --- Application ---
    log_level: str = "INFO"

    @property
    def event_secret_bytes(self) -> bytes:
        """The EventSub HMAC key as bytes (empty if unset)."""
        return self.twitch_event_secret.get_secret_value().encode("utf-8")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached application settings singleton."""
    return Settings()
