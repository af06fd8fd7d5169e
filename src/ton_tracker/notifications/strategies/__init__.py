"""Notification strategies."""

from ton_tracker.notifications.strategies.base import BaseNotificationStrategy
from ton_tracker.notifications.strategies.console import ConsoleNotifier
from ton_tracker.notifications.strategies.telegram import TelegramNotifier

__all__ = [
    "BaseNotificationStrategy",
    "ConsoleNotifier",
    "TelegramNotifier",
]
