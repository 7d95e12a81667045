"""
Typed settings for the SHL live notifier service.

Uses Pydantic Settings to load configuration from environment variables
with validation and type safety. A local .env file is read when present.
"""

from __future__ import annotations

from datetime import date
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .validate_env import validate_env


class FeedConfig(BaseModel):
    base_url: str = Field(default="https://openapi.shl.se")
    client_id: str | None = None
    client_secret: str | None = None
    request_timeout_seconds: int = 10
    # Network errors are retried this many times in total before giving up
    retry_attempts: int = 2


class LoopConfig(BaseModel):
    # A game becomes eligible for live polling this long before its start
    live_window_minutes: int = 5
    live_poll_seconds: int = 3
    idle_poll_seconds: int = 60
    error_backoff_seconds: int = 60


class PushConfig(BaseModel):
    apn_key_path: str | None = None
    apn_key_id: str | None = None
    apn_team_id: str | None = None
    apn_topic: str = "se.shl.live"
    production: bool = False
    mute: bool = True
    sound: str = "ping.aiff"
    expiry_seconds: int = 3600


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Nested groups can be set with double-underscore syntax
    (FEED_CONFIG__BASE_URL), the common credentials also have flat aliases.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        env_ignore_empty=True,
        extra="allow",
    )

    environment: str = Field("development", alias="ENVIRONMENT")
    log_level: str | None = Field(None, alias="LOG_LEVEL")
    season: int = Field(default_factory=lambda: date.today().year, alias="SEASON")
    storage_dir: Path = Field(Path("./data"), alias="STORAGE_DIR")

    feed_config: FeedConfig = Field(default_factory=FeedConfig)
    loop_config: LoopConfig = Field(default_factory=LoopConfig)
    push_config: PushConfig = Field(default_factory=PushConfig)

    shl_client_id: str | None = Field(None, alias="SHL_CLIENT_ID")
    shl_client_secret: str | None = Field(None, alias="SHL_CLIENT_SECRET")
    apn_key_path: str | None = Field(None, alias="APN_KEY_PATH")
    apn_key_id: str | None = Field(None, alias="APN_KEY_ID")
    apn_team_id: str | None = Field(None, alias="APN_TEAM_ID")
    mute_notifications: bool | None = Field(None, alias="MUTE_NOTIFICATIONS")

    @model_validator(mode="after")
    def _apply_flat_overrides(self) -> Settings:
        """
        Let the flat credential env vars override the nested groups, and
        unmute pushes by default in production.
        """
        if self.shl_client_id:
            self.feed_config.client_id = self.shl_client_id
        if self.shl_client_secret:
            self.feed_config.client_secret = self.shl_client_secret
        if self.apn_key_path:
            self.push_config.apn_key_path = self.apn_key_path
        if self.apn_key_id:
            self.push_config.apn_key_id = self.apn_key_id
        if self.apn_team_id:
            self.push_config.apn_team_id = self.apn_team_id

        if self.mute_notifications is not None:
            self.push_config.mute = self.mute_notifications
        elif self.environment == "production":
            self.push_config.mute = False
        self.push_config.production = self.environment == "production"
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return cached settings instance.

    Settings are cached to avoid re-parsing environment variables
    on every access.
    """
    validate_env()
    return Settings()


# Global settings instance - import this in other modules
settings = get_settings()
