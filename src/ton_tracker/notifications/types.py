"""Notification message types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class NotificationMessage:
    """Structured notification for one subscriber, rendered to text by a styler."""

    event_type: str
    user_id: int
    payload: dict[str, Any] | None = None


class NotificationStyler(Protocol):
    """Render a message into a formatted string for delivery."""

    def render(self, message: NotificationMessage) -> str:
        """Return the formatted (HTML) text for the given message."""
        ...


class NotificationSink(Protocol):
    """Deliver formatted text to a subscriber."""

    async def deliver(self, user_id: int, text: str) -> bool:
        """Return True if at least one channel delivered the text."""
        ...
