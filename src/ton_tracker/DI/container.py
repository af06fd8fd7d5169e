# -*- coding: utf-8 -*-
"""Dependency injection container (dependency-injector)."""

from __future__ import annotations

from dependency_injector import containers, providers

from ton_tracker.clients.http import AsyncHttpClient
from ton_tracker.clients.throttle import RequestThrottle
from ton_tracker.clients.tonapi import TonApiClient
from ton_tracker.config import Settings, get_settings
from ton_tracker.notifications.notification_manager import NotificationService
from ton_tracker.notifications.strategies.base import BaseNotificationStrategy
from ton_tracker.notifications.strategies.console import ConsoleNotifier
from ton_tracker.notifications.strategies.telegram import TelegramNotifier
from ton_tracker.notifications.stylers.notification_styler import EventNotificationStyler
from ton_tracker.persistence.database import Database
from ton_tracker.persistence.repositories.sql import (
    SqlProcessedEventRepository,
    SqlWalletRepository,
)
from ton_tracker.server import WebhookServer
from ton_tracker.services.backfill import BackfillSeeder
from ton_tracker.services.notifier import EventNotifier
from ton_tracker.services.webhook import EventReceiver, SubscriptionSynchronizer


def _build_throttle(settings: Settings) -> RequestThrottle:
    """Build the process-wide TonAPI throttle with the interval from settings."""
    return RequestThrottle(settings.tonapi.min_request_interval_seconds)


def _build_notification_notifiers(settings: Settings) -> list[BaseNotificationStrategy]:
    notifiers: list[BaseNotificationStrategy] = []
    if settings.console.enabled:
        notifiers.append(ConsoleNotifier(settings=settings))
    if settings.telegram.enabled:
        notifiers.append(TelegramNotifier(settings=settings))
    return notifiers


class Container(containers.DeclarativeContainer):
    """Application container. Wires settings, TonAPI client, storage, webhook services, notifications."""

    config = providers.Callable(get_settings)

    throttle = providers.Singleton(_build_throttle, config)

    http_client = providers.Singleton(
        AsyncHttpClient,
        settings=config,
        throttle=throttle,
    )

    tonapi_client = providers.Singleton(
        TonApiClient,
        http_client=http_client,
        settings=config,
    )

    database = providers.Singleton(Database, settings=config)

    wallet_repository = providers.Singleton(SqlWalletRepository, database=database)

    processed_event_repository = providers.Singleton(SqlProcessedEventRepository, database=database)

    notification_styler = providers.Singleton(EventNotificationStyler)

    notification_service = providers.Singleton(
        NotificationService,
        notifiers=providers.Callable(_build_notification_notifiers, config),
    )

    event_notifier = providers.Singleton(
        EventNotifier,
        settings=config,
        sink=notification_service,
        styler=notification_styler,
    )

    subscription_synchronizer = providers.Singleton(
        SubscriptionSynchronizer,
        settings=config,
        tonapi=tonapi_client,
        wallet_repository=wallet_repository,
    )

    event_receiver = providers.Singleton(
        EventReceiver,
        tonapi=tonapi_client,
        wallet_repository=wallet_repository,
        processed_event_repository=processed_event_repository,
        handler=event_notifier.provided.handle_event,
    )

    webhook_server = providers.Singleton(
        WebhookServer,
        settings=config,
        receiver=event_receiver,
    )

    backfill_seeder = providers.Singleton(
        BackfillSeeder,
        settings=config,
        tonapi=tonapi_client,
        wallet_repository=wallet_repository,
        processed_event_repository=processed_event_repository,
    )
