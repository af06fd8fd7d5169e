"""Notification service: the sink the event pipeline delivers to."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import structlog

from ton_tracker.notifications.strategies import BaseNotificationStrategy


@dataclass
class NotificationService:
    """Deliver formatted text to a subscriber through all configured channels."""

    notifiers: list[BaseNotificationStrategy]
    get_logger: Callable[[str], Any] = field(default=structlog.get_logger)
    _logger: Any = field(init=False)

    def __post_init__(self) -> None:
        self._logger = self.get_logger("NotificationService")

    async def initialize(self) -> None:
        """Initialize all notifiers."""
        self._logger.debug(
            "notification_init_started",
            notification_notifiers_count=len(self.notifiers),
        )
        for notifier in self.notifiers:
            await notifier.initialize()
        if not self.notifiers:
            self._logger.warning("notification_init_no_notifiers")

    async def shutdown(self) -> None:
        """Shutdown all notifiers."""
        for notifier in self.notifiers:
            await notifier.shutdown()
        self._logger.debug("notification_shutdown_complete")

    async def deliver(self, user_id: int, text: str) -> bool:
        """Send text to user_id on every channel. True if at least one channel delivered.

        A failing channel is logged and does not prevent the others from sending.
        """
        delivered = False
        for notifier in self.notifiers:
            try:
                ok = await notifier.send(user_id, text)
            except Exception as e:
                self._logger.exception(
                    "notification_channel_failed",
                    notification_channel=type(notifier).__name__,
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                ok = False
            delivered = delivered or ok
        if not delivered:
            self._logger.warning(
                "notification_not_delivered",
                notification_user_id=user_id,
                notification_notifiers_count=len(self.notifiers),
            )
        return delivered
