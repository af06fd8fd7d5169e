# -*- coding: utf-8 -*-
"""Telegram notification strategy (async)."""

from __future__ import annotations

import asyncio
import time
import structlog
from typing import Any, Callable, Optional, TYPE_CHECKING

from telegram import Bot, LinkPreviewOptions
from telegram.error import (
    BadRequest,
    Forbidden,
    NetworkError,
    RetryAfter,
    TelegramError,
    TimedOut,
)
from telegram.request import HTTPXRequest

from ton_tracker.exceptions import MissingRequiredConfigError
from ton_tracker.notifications.strategies.base import BaseNotificationStrategy

if TYPE_CHECKING:
    from ton_tracker.config.config import Settings


class TelegramNotifier(BaseNotificationStrategy):
    """Send notifications to subscribers' Telegram chats using python-telegram-bot."""

    def __init__(
        self,
        settings: "Settings",
        *,
        bot: Optional[Bot] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        super().__init__(settings)
        self._logger = get_logger(logger_name or self.__class__.__name__)

        cfg = self.settings.telegram
        if not cfg.enabled or not cfg.api_key:
            raise MissingRequiredConfigError("TELEGRAM__API_KEY")

        self._cfg = cfg

        self._bot: Optional[Bot] = bot
        self._running = False
        self._message_timestamps: list[float] = []
        self._rate_lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._running

    async def initialize(self) -> None:
        if self._running:
            self._logger.warning("telegram_already_running")
            return
        if self._bot is None:
            request = HTTPXRequest(
                connect_timeout=self._cfg.connect_timeout,
                read_timeout=self._cfg.read_timeout,
                write_timeout=self._cfg.write_timeout,
                pool_timeout=self._cfg.pool_timeout,
            )
            self._bot = Bot(token=str(self._cfg.api_key), request=request)
        self._running = True

    async def shutdown(self) -> None:
        if not self._running:
            return
        self._bot = None
        self._running = False

    async def send(self, user_id: int, text: str) -> bool:
        if not self._running or self._bot is None:
            self._logger.warning("telegram_not_running_cannot_send")
            return False

        await self._apply_rate_limit()
        attempt = 1
        while attempt <= max(1, self._cfg.max_retries):
            try:
                await self._bot.send_message(
                    chat_id=user_id,
                    text=text,
                    parse_mode="HTML",
                    link_preview_options=LinkPreviewOptions(is_disabled=True),
                )
                return True
            except RetryAfter as exc:
                retry_after = exc.retry_after
                retry_seconds = (
                    retry_after.total_seconds()
                    if hasattr(retry_after, "total_seconds")
                    else float(retry_after)
                )
                self._logger.warning(
                    "telegram_rate_limit_retry_after",
                    retry_seconds=retry_seconds,
                )
                await asyncio.sleep(retry_seconds)
            except (BadRequest, Forbidden) as exc:
                # Blocked bot, deleted chat, malformed HTML: retrying cannot help.
                self._logger.error(
                    "telegram_fatal_error",
                    telegram_user_id=user_id,
                    error_type=type(exc).__name__,
                    error_message=str(exc),
                )
                return False
            except (NetworkError, TimedOut, TelegramError) as exc:
                backoff = min(60.0, self._cfg.backoff_base_seconds * (2 ** (attempt - 1)))
                self._logger.warning(
                    "telegram_error_retry",
                    error_type=type(exc).__name__,
                    attempt=attempt,
                    max_retries=self._cfg.max_retries,
                    backoff_seconds=backoff,
                )
                await asyncio.sleep(backoff)
            attempt += 1

        self._logger.error(
            "telegram_max_retries_exceeded_message_dropped",
            telegram_user_id=user_id,
        )
        return False

    async def _apply_rate_limit(self) -> None:
        """Sliding one-minute window shared by all sends of this bot."""
        if self._cfg.messages_per_minute <= 0:
            return
        async with self._rate_lock:
            now = time.monotonic()
            window_start = now - 60
            self._message_timestamps = [t for t in self._message_timestamps if t >= window_start]
            if len(self._message_timestamps) >= self._cfg.messages_per_minute:
                sleep_time = 60 - (now - self._message_timestamps[0])
                if sleep_time > 0:
                    await asyncio.sleep(sleep_time)
            self._message_timestamps.append(time.monotonic())
