# -*- coding: utf-8 -*-
"""Unit tests for background task cancellation at shutdown."""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

from ton_tracker.main import _cancel


async def test_cancel_logs_failed_task_instead_of_raising() -> None:
    async def _fail() -> None:
        raise ValueError("bad webhook id")

    task = asyncio.create_task(_fail(), name="subscription_sync")
    await asyncio.sleep(0)
    logger = MagicMock()

    await _cancel(task, logger)

    logger.exception.assert_called_once()
    assert logger.exception.call_args.args == ("main_task_failed",)
    assert logger.exception.call_args.kwargs["task_name"] == "subscription_sync"
    assert logger.exception.call_args.kwargs["error_type"] == "ValueError"


async def test_cancel_stops_running_task_quietly() -> None:
    started = asyncio.Event()

    async def _forever() -> None:
        started.set()
        await asyncio.Event().wait()

    task = asyncio.create_task(_forever())
    await started.wait()
    logger = MagicMock()

    await _cancel(task, logger)

    assert task.cancelled()
    logger.exception.assert_not_called()
