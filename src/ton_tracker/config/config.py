# -*- coding: utf-8 -*-
"""Configuration loaded from environment via Pydantic Settings.

Nested env vars use <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, TONAPI__API_KEY.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """General application configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    app_name: str = "ton-tracker"
    service_name: Optional[str] = None
    service_version: Optional[str] = None
    environment: Literal["development", "test", "production"] = "development"


class LoggingSettings(BaseSettings):
    """Structured logging configuration for structlog/stdlib/Logfire."""

    model_config = SettingsConfigDict(extra="ignore")

    console_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    logfire_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    log_to_console: bool = True
    log_to_file: bool = False
    log_file_path: str = "logs/ton_tracker.log"
    # TimedRotatingFileHandler: when to rotate (S/M/H/D/W0–W6/midnight), interval, backups to keep
    log_file_when: Literal[
        "S", "M", "H", "D", "W0", "W1", "W2", "W3", "W4", "W5", "W6", "midnight"
    ] = "midnight"
    log_file_interval: int = 1
    log_file_backup_count: int = 30
    log_file_utc: bool = True

    # Main output format: JSONRenderer if True, ConsoleRenderer if False
    json_format: bool = False

    logfire_enabled: bool = False
    logfire_token: Optional[str] = None


class TonApiSettings(BaseSettings):
    """Configuration for the TonAPI HTTP client (from env TONAPI__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    base_url: str = Field(
        default="https://tonapi.io/v2",
        description="TonAPI base URL.",
    )
    api_key: Optional[str] = Field(
        default=None,
        description="TonAPI key, sent as a Bearer token when set.",
    )
    timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        le=120.0,
        description="HTTP request timeout in seconds.",
    )
    min_request_interval_seconds: float = Field(
        default=0.25,
        ge=0.0,
        le=10.0,
        description="Minimum gap between two outbound requests (process-wide).",
    )

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")


class WebhookSettings(BaseSettings):
    """Webhook receiver and subscription sync (from env WEBHOOK__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    endpoint: str = Field(
        default="",
        description="Public callback URL registered at TonAPI. Empty disables subscription sync.",
    )
    host: str = Field(default="0.0.0.0", description="Bind address of the webhook server.")
    port: int = Field(default=8080, ge=1, le=65535)
    sync_interval_seconds: float = Field(default=30.0, ge=0.1, le=3600.0)
    sync_startup_delay_seconds: float = Field(default=5.0, ge=0.0, le=600.0)

    @property
    def sync_enabled(self) -> bool:
        """True when a callback endpoint is configured."""
        return bool(self.endpoint.strip())


class BackfillSettings(BaseSettings):
    """Startup backfill of the processed-event ledger (from env BACKFILL__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = True
    events_limit: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Most recent events per wallet marked as processed at startup.",
    )


class StorageSettings(BaseSettings):
    """Database configuration (from env STORAGE__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    database_url: str = Field(
        default="sqlite+aiosqlite:///./tracker.db",
        description="SQLAlchemy async database URL.",
    )
    echo: bool = False


class FilterSettings(BaseSettings):
    """Global notification filters (from env FILTERS__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    min_transfer_ton: float = Field(
        default=0.0,
        ge=0.0,
        description="Transfers below this amount (TON) are not notified.",
    )


class TelegramNotificationSettings(BaseSettings):
    """Telegram notifications (from env TELEGRAM__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = False
    api_key: Optional[str] = Field(default=None, description="Telegram bot API key.")
    messages_per_minute: int = Field(default=30, ge=1, le=120)
    max_retries: int = Field(default=5, ge=0, le=20)
    backoff_base_seconds: float = Field(default=1.0, ge=0.1, le=60.0)
    connect_timeout: float = Field(default=10.0, ge=0.1, le=60.0)
    read_timeout: float = Field(default=20.0, ge=0.1, le=120.0)
    write_timeout: float = Field(default=20.0, ge=0.1, le=120.0)
    pool_timeout: float = Field(default=10.0, ge=0.1, le=60.0)


class ConsoleNotificationSettings(BaseSettings):
    """Console notification settings."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = True


class Settings(BaseSettings):
    """Root application configuration.

    Groups all sub-configurations so the rest of the code does not
    read environment variables directly. Nested overrides use
    <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, WEBHOOK__ENDPOINT.
    """

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    tonapi: TonApiSettings = Field(default_factory=TonApiSettings)
    webhook: WebhookSettings = Field(default_factory=WebhookSettings)
    backfill: BackfillSettings = Field(default_factory=BackfillSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    filters: FilterSettings = Field(default_factory=FilterSettings)
    telegram: TelegramNotificationSettings = Field(default_factory=TelegramNotificationSettings)
    console: ConsoleNotificationSettings = Field(default_factory=ConsoleNotificationSettings)

    @classmethod
    def from_env(cls, **overrides: Any) -> Settings:
        """Build settings from environment (and .env), with optional overrides.

        Nested overrides can be passed as flat keys or nested dicts, e.g.:
        - from_env(tonapi={"timeout_seconds": 30})
        - from_env(webhook={"endpoint": "https://example.org/webhook"})

        Returns:
            A new Settings instance.
        """
        return cls(**overrides)


@lru_cache
def get_settings() -> Settings:
    """Return a single cached instance of Settings.

    Typical usage:

        from ton_tracker.config import get_settings

        settings = get_settings()
        interval = settings.webhook.sync_interval_seconds
    """
    return Settings()
