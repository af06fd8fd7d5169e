# -*- coding: utf-8 -*-
"""
Entry point for the TON wallet tracker.

Orchestrates: logging, settings, container, database, notifiers, webhook
server, subscription sync loop, startup backfill, shutdown (SIGINT/SIGTERM or
CancelledError).
Events flow: TonAPI webhook -> WebhookServer -> EventReceiver (dedupe) -> EventNotifier -> NotificationService.

Run with: python -m ton_tracker.main  (or the ton-tracker console script)
"""
from __future__ import annotations

import asyncio
import contextlib
import signal
from typing import Any

import structlog

from ton_tracker.DI import Container
from ton_tracker.config import get_settings
from ton_tracker.logging.config import configure_logging


def _setup_signals(shutdown_event: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, shutdown_event.set)
        except NotImplementedError:
            pass  # Windows has no add_signal_handler


async def _cancel(task: asyncio.Task[Any], logger: Any) -> None:
    """Cancel a background task; its own failure is logged, not raised."""
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
    except Exception as e:
        logger.exception(
            "main_task_failed",
            task_name=task.get_name(),
            error_type=type(e).__name__,
            error_message=str(e),
        )


async def run() -> None:
    settings = get_settings()
    configure_logging(settings)
    logger = structlog.get_logger("main")

    container = Container()
    database = container.database()
    http_client = container.http_client()
    notification_service = container.notification_service()
    synchronizer = container.subscription_synchronizer()
    receiver = container.event_receiver()
    server = container.webhook_server()
    seeder = container.backfill_seeder()

    shutdown_event = asyncio.Event()
    _setup_signals(shutdown_event)
    tasks: list[asyncio.Task[Any]] = []

    try:
        await database.init()
        await notification_service.initialize()
        await synchronizer.initialize()
        await server.start()

        tasks.append(asyncio.create_task(synchronizer.run(shutdown_event), name="subscription_sync"))
        tasks.append(asyncio.create_task(seeder.seed(shutdown_event), name="backfill_seed"))
        logger.info(
            "main_started",
            webhook_sync_enabled=settings.webhook.sync_enabled,
            backfill_enabled=settings.backfill.enabled,
        )
        await shutdown_event.wait()
        logger.info("main_shutdown_requested")
    finally:
        shutdown_event.set()
        await server.stop()
        for task in tasks:
            await _cancel(task, logger)
        await receiver.drain()
        await http_client.aclose()
        await database.dispose()
        await notification_service.shutdown()
        logger.info("main_shutdown_complete")


def main() -> None:
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(run())


__all__ = ["run", "main"]

if __name__ == "__main__":
    main()
