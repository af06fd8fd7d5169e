# -*- coding: utf-8 -*-
"""Unit tests for TelegramNotifier with a fake bot."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock

import pytest
from telegram.error import BadRequest, Forbidden, NetworkError, RetryAfter

from ton_tracker.config import Settings
from ton_tracker.exceptions import MissingRequiredConfigError
from ton_tracker.notifications.strategies.telegram import TelegramNotifier


@pytest.fixture
def telegram_settings(settings_factory: Callable[..., Settings]) -> Settings:
    return settings_factory(
        telegram={
            "enabled": True,
            "api_key": "123:abc",
            "max_retries": 3,
            "backoff_base_seconds": 0.1,
            "messages_per_minute": 120,
        }
    )


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch: pytest.MonkeyPatch) -> AsyncMock:
    sleep = AsyncMock()
    monkeypatch.setattr("ton_tracker.notifications.strategies.telegram.asyncio.sleep", sleep)
    return sleep


async def _started(settings: Settings, bot: Any) -> TelegramNotifier:
    notifier = TelegramNotifier(settings, bot=bot)
    await notifier.initialize()
    return notifier


def test_requires_api_key(settings_factory: Callable[..., Settings]) -> None:
    with pytest.raises(MissingRequiredConfigError):
        TelegramNotifier(settings_factory(telegram={"enabled": True, "api_key": None}))


async def test_send_targets_user_chat_with_html(telegram_settings: Settings) -> None:
    bot = AsyncMock()
    notifier = await _started(telegram_settings, bot)

    assert await notifier.send(1001, "<b>hi</b>") is True

    kwargs = bot.send_message.await_args.kwargs
    assert kwargs["chat_id"] == 1001
    assert kwargs["text"] == "<b>hi</b>"
    assert kwargs["parse_mode"] == "HTML"


async def test_send_before_initialize_returns_false(telegram_settings: Settings) -> None:
    bot = AsyncMock()
    notifier = TelegramNotifier(telegram_settings, bot=bot)

    assert await notifier.send(1, "x") is False
    bot.send_message.assert_not_called()


@pytest.mark.parametrize("error", [BadRequest("chat not found"), Forbidden("bot was blocked")])
async def test_fatal_errors_are_not_retried(telegram_settings: Settings, error: Exception) -> None:
    bot = AsyncMock()
    bot.send_message.side_effect = error
    notifier = await _started(telegram_settings, bot)

    assert await notifier.send(1, "x") is False
    assert bot.send_message.await_count == 1


async def test_network_errors_are_retried_then_succeed(
    telegram_settings: Settings,
    no_sleep: AsyncMock,
) -> None:
    bot = AsyncMock()
    bot.send_message.side_effect = [NetworkError("reset"), RetryAfter(2), None]
    notifier = await _started(telegram_settings, bot)

    assert await notifier.send(1, "x") is True
    assert bot.send_message.await_count == 3
    waits = [c.args[0] for c in no_sleep.await_args_list]
    assert waits[:2] == [pytest.approx(0.1), pytest.approx(2.0)]


async def test_gives_up_after_max_retries(telegram_settings: Settings) -> None:
    bot = AsyncMock()
    bot.send_message.side_effect = NetworkError("down")
    notifier = await _started(telegram_settings, bot)

    assert await notifier.send(1, "x") is False
    assert bot.send_message.await_count == 3
