# -*- coding: utf-8 -*-
"""Base notification strategy."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from ton_tracker.config.config import Settings


class BaseNotificationStrategy(ABC):
    """Abstract base class for notification channels."""

    def __init__(self, settings: "Settings"):
        """
        Initialize the base strategy.

        Args:
            settings: Global configuration (Settings).
        """
        self.settings = settings

    @property
    @abstractmethod
    def is_running(self) -> bool:
        """Whether the channel is initialized and accepting messages."""
        pass

    @abstractmethod
    async def initialize(self) -> None:
        """Open the channel."""
        pass

    @abstractmethod
    async def shutdown(self) -> None:
        """Close the channel."""
        pass

    @abstractmethod
    async def send(self, user_id: int, text: str) -> bool:
        """
        Send text to a subscriber.

        Args:
            user_id: Subscriber identifier (Telegram chat id).
            text: Already formatted (HTML) text.

        Returns:
            True if the message was delivered.
        """
        pass
