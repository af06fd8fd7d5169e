"""Configuration subpackage."""

from ton_tracker.config.config import (
    AppSettings,
    BackfillSettings,
    ConsoleNotificationSettings,
    FilterSettings,
    LoggingSettings,
    Settings,
    StorageSettings,
    TelegramNotificationSettings,
    TonApiSettings,
    WebhookSettings,
    get_settings,
)

__all__ = [
    "AppSettings",
    "BackfillSettings",
    "ConsoleNotificationSettings",
    "FilterSettings",
    "LoggingSettings",
    "Settings",
    "StorageSettings",
    "TelegramNotificationSettings",
    "TonApiSettings",
    "WebhookSettings",
    "get_settings",
]
