# -*- coding: utf-8 -*-
"""Console notifier (print-based)."""

from __future__ import annotations

from ton_tracker.config import Settings
from ton_tracker.notifications.strategies.base import BaseNotificationStrategy


class ConsoleNotifier(BaseNotificationStrategy):
    """Print notifications to stdout, prefixed with the recipient."""

    def __init__(self, settings: "Settings") -> None:
        super().__init__(settings)
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    async def initialize(self) -> None:
        self._running = True

    async def shutdown(self) -> None:
        self._running = False

    async def send(self, user_id: int, text: str) -> bool:
        if not self.is_running or not self.settings.console.enabled:
            return False
        print(f"[to {user_id}]\n{text}\n")
        return True
