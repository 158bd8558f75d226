"""Service configuration loaded from environment variables and ``.env``."""

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class FeedSettings(BaseSettings):
    """DeFi Pulse price feed parameters."""

    model_config = SettingsConfigDict(env_prefix="DEFIPULSE_")

    api_key: SecretStr = SecretStr("")
    base_url: str = "https://data-api.defipulse.com"
    lookback: int = Field(default=7200, gt=0)  # seconds of history kept
    min_time_between_updates: int = Field(default=60, ge=0)  # seconds
    decimals: int = Field(default=18, ge=0)
    request_timeout: float = Field(default=10.0, gt=0)  # seconds


class PollerSettings(BaseSettings):
    """Update loop timing."""

    model_config = SettingsConfigDict(env_prefix="POLLER_")

    interval: float = Field(default=60.0, gt=0)  # seconds between update() calls


class ApiSettings(BaseSettings):
    """JSON API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    enabled: bool = True
    host: str = "0.0.0.0"
    port: int = 8080


class AppSettings(BaseSettings):
    """Root settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    feed: FeedSettings = FeedSettings()
    poller: PollerSettings = PollerSettings()
    api: ApiSettings = ApiSettings()
