"""Notification subsystem."""

from ton_tracker.notifications.notification_manager import NotificationService
from ton_tracker.notifications.strategies import (
    BaseNotificationStrategy,
    ConsoleNotifier,
    TelegramNotifier,
)
from ton_tracker.notifications.stylers.notification_styler import EventNotificationStyler
from ton_tracker.notifications.types import (
    NotificationMessage,
    NotificationSink,
    NotificationStyler,
)

__all__ = [
    "BaseNotificationStrategy",
    "ConsoleNotifier",
    "EventNotificationStyler",
    "NotificationMessage",
    "NotificationService",
    "NotificationSink",
    "NotificationStyler",
    "TelegramNotifier",
]
