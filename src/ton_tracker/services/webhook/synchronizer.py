"""Subscription synchronizer: keeps TonAPI webhook subscriptions equal to the tracked address set."""

from __future__ import annotations

import asyncio
import enum
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

from ton_tracker.exceptions import TonTrackerError
from ton_tracker.services.webhook.reconcile import ReconcilePlan, reconcile

if TYPE_CHECKING:
    from ton_tracker.clients.tonapi import TonApiClient
    from ton_tracker.config import Settings
    from ton_tracker.persistence.repositories.interfaces import IWalletRepository


class SyncState(enum.StrEnum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    DISABLED = "disabled"


@dataclass(frozen=True)
class SyncResult:
    """Outcome of one sync tick."""

    added: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()
    add_failed: tuple[str, ...] = ()
    remove_failed: tuple[str, ...] = ()
    skipped: bool = False
    """True when the tick did nothing (not initialized, disabled, storage failure)."""


async def _wait_for_shutdown(shutdown_event: asyncio.Event, timeout: float) -> bool:
    """Wait up to timeout seconds; True if shutdown_event was set."""
    if shutdown_event.is_set():
        return True
    try:
        await asyncio.wait_for(shutdown_event.wait(), timeout=max(0.0, timeout))
    except TimeoutError:
        return False
    return True


class SubscriptionSynchronizer:
    """Control loop reconciling upstream account-tx subscriptions with storage.

    States: uninitialized -> initialized (webhook id adopted) -> syncing on a
    fixed timer; or disabled when no callback endpoint is configured. The
    in-memory ``subscribed`` set is the previous tick's result; storage is the
    source of truth. Ticks are serialized by a lock; each is idempotent, so a
    failed call is simply retried on the next tick.
    """

    def __init__(
        self,
        settings: Settings,
        tonapi: TonApiClient,
        wallet_repository: IWalletRepository,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        self._settings = settings
        self._tonapi = tonapi
        self._wallets = wallet_repository
        self._logger = get_logger(logger_name or self.__class__.__name__)
        self._endpoint = settings.webhook.endpoint.strip()
        self._lock = asyncio.Lock()
        self._webhook_id: int | None = None
        self._subscribed: set[str] = set()
        self._state = SyncState.DISABLED if not self._endpoint else SyncState.UNINITIALIZED

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def webhook_id(self) -> int | None:
        return self._webhook_id

    @property
    def subscribed(self) -> frozenset[str]:
        """Snapshot of addresses believed subscribed upstream."""
        return frozenset(self._subscribed)

    @property
    def enabled(self) -> bool:
        return self._state is not SyncState.DISABLED

    async def initialize(self) -> bool:
        """Find-or-create the webhook registration for the configured endpoint.

        Returns True when a webhook id is adopted. Disabled mode returns False
        without any upstream call. Upstream failures are logged and leave the
        state uninitialized so the loop can retry.
        """
        if self._state is SyncState.DISABLED:
            self._logger.warning("webhook_sync_disabled", reason="endpoint_not_configured")
            return False
        if self._state is SyncState.INITIALIZED:
            return True
        try:
            registrations = await self._tonapi.list_webhooks()
            existing = next(
                (r for r in registrations if r.endpoint == self._endpoint and r.id > 0),
                None,
            )
            registration = existing or await self._tonapi.create_webhook(self._endpoint)
        except TonTrackerError as e:
            self._logger.error(
                "webhook_init_failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return False
        return self._adopt(registration.id, created=existing is None)

    def _adopt(self, webhook_id: int, *, created: bool) -> bool:
        # Id 0 means upstream returned no usable id; never sync against it.
        if webhook_id <= 0:
            self._logger.error("webhook_init_missing_id", webhook_endpoint=self._endpoint)
            return False
        self._webhook_id = webhook_id
        self._state = SyncState.INITIALIZED
        self._logger.info(
            "webhook_created" if created else "webhook_existing_adopted",
            webhook_id=webhook_id,
            webhook_endpoint=self._endpoint,
        )
        return True

    async def sync_once(self) -> SyncResult:
        """Run one reconciliation tick (serialized with any other tick)."""
        async with self._lock:
            webhook_id = self._webhook_id
            if self._state is not SyncState.INITIALIZED or not webhook_id:
                return SyncResult(skipped=True)

            try:
                needed = await self._wallets.list_addresses()
            except TonTrackerError as e:
                self._logger.error(
                    "webhook_sync_load_wallets_failed",
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                return SyncResult(skipped=True)

            plan: ReconcilePlan = reconcile(needed, self._subscribed)
            added: tuple[str, ...] = ()
            removed: tuple[str, ...] = ()
            add_failed: tuple[str, ...] = ()
            remove_failed: tuple[str, ...] = ()

            if plan.to_add:
                try:
                    await self._tonapi.subscribe_accounts(webhook_id, plan.to_add)
                except TonTrackerError as e:
                    add_failed = plan.to_add
                    self._logger.error(
                        "webhook_subscribe_failed",
                        webhook_accounts_count=len(plan.to_add),
                        error_type=type(e).__name__,
                        error_message=str(e),
                    )
                else:
                    self._subscribed.update(plan.to_add)
                    added = plan.to_add
                    self._logger.info("webhook_subscribed", webhook_accounts_count=len(added))

            if plan.to_remove:
                try:
                    await self._tonapi.unsubscribe_accounts(webhook_id, plan.to_remove)
                except TonTrackerError as e:
                    remove_failed = plan.to_remove
                    self._logger.error(
                        "webhook_unsubscribe_failed",
                        webhook_accounts_count=len(plan.to_remove),
                        error_type=type(e).__name__,
                        error_message=str(e),
                    )
                else:
                    self._subscribed.difference_update(plan.to_remove)
                    removed = plan.to_remove
                    self._logger.info("webhook_unsubscribed", webhook_accounts_count=len(removed))

            return SyncResult(
                added=added,
                removed=removed,
                add_failed=add_failed,
                remove_failed=remove_failed,
            )

    async def _tick(self) -> None:
        try:
            if self._state is SyncState.UNINITIALIZED and not await self.initialize():
                return
            await self.sync_once()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._logger.exception(
                "webhook_sync_tick_failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )

    async def run(self, shutdown_event: asyncio.Event) -> None:
        """Tick after the startup delay, then every sync interval, until shutdown.

        Slow ticks drop the timer slots they overran instead of queuing them.
        Returns immediately in disabled mode.
        """
        if self._state is SyncState.DISABLED:
            self._logger.info("webhook_sync_loop_not_started", reason="disabled")
            return

        cfg = self._settings.webhook
        interval = cfg.sync_interval_seconds
        self._logger.info(
            "webhook_sync_loop_started",
            webhook_sync_interval_seconds=interval,
            webhook_sync_startup_delay_seconds=cfg.sync_startup_delay_seconds,
        )
        loop = asyncio.get_running_loop()
        try:
            if await _wait_for_shutdown(shutdown_event, cfg.sync_startup_delay_seconds):
                return
            next_tick = loop.time()
            while True:
                await self._tick()
                next_tick += interval
                now = loop.time()
                if next_tick <= now:
                    missed = int((now - next_tick) // interval) + 1
                    next_tick += missed * interval
                    self._logger.warning("webhook_sync_ticks_skipped", webhook_ticks_skipped=missed)
                if await _wait_for_shutdown(shutdown_event, next_tick - now):
                    return
        except asyncio.CancelledError:
            self._logger.debug("webhook_sync_loop_cancelled")
            raise
        finally:
            self._logger.info("webhook_sync_loop_stopped")
