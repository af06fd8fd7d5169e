"""Startup backfill: mark each wallet's recent history as already processed."""

from __future__ import annotations

import asyncio
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog
from structlog.contextvars import bound_contextvars

from ton_tracker.exceptions import TonTrackerError
from ton_tracker.models.wallet import TrackedWallet
from ton_tracker.utils.validation import mask_address

if TYPE_CHECKING:
    from ton_tracker.clients.tonapi import TonApiClient
    from ton_tracker.config import Settings
    from ton_tracker.persistence.repositories.interfaces import (
        IProcessedEventRepository,
        IWalletRepository,
    )


@dataclass(frozen=True)
class SeedResult:
    wallets: int = 0
    events_marked: int = 0
    """Ledger entries newly inserted by the seed."""
    failed_wallets: int = 0
    interrupted: bool = False
    """True when shutdown stopped the run before every address was fetched."""


class BackfillSeeder:
    """Inserts the K most recent event ids of every tracked wallet into the ledger.

    After a restart, historical events that are redelivered (or replayed) then
    dedupe silently instead of producing stale notifications. Events are
    fetched once per distinct address and marked for every wallet tracking it.
    """

    def __init__(
        self,
        settings: Settings,
        tonapi: TonApiClient,
        wallet_repository: IWalletRepository,
        processed_event_repository: IProcessedEventRepository,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        self._settings = settings
        self._tonapi = tonapi
        self._wallets = wallet_repository
        self._processed = processed_event_repository
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def seed(self, shutdown_event: asyncio.Event | None = None) -> SeedResult:
        """Run the backfill once. Failures are logged; nothing is raised.

        When shutdown_event is set, no further address is fetched.
        """
        cfg = self._settings.backfill
        if not cfg.enabled:
            self._logger.info("backfill_disabled")
            return SeedResult()

        try:
            wallets = await self._wallets.list_all()
        except TonTrackerError as e:
            self._logger.error(
                "backfill_load_wallets_failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return SeedResult()

        by_address: dict[str, list[TrackedWallet]] = defaultdict(list)
        for wallet in wallets:
            by_address[wallet.address_raw].append(wallet)

        self._logger.info(
            "backfill_started",
            backfill_wallets_count=len(wallets),
            backfill_addresses_count=len(by_address),
            backfill_events_limit=cfg.events_limit,
        )
        marked = 0
        failed = 0
        interrupted = False
        for address, group in by_address.items():
            if shutdown_event is not None and shutdown_event.is_set():
                interrupted = True
                self._logger.info("backfill_interrupted", backfill_events_marked=marked)
                break
            with bound_contextvars(backfill_address_masked=mask_address(address)):
                try:
                    events = await self._tonapi.get_events(address, limit=cfg.events_limit)
                except TonTrackerError as e:
                    failed += len(group)
                    self._logger.warning(
                        "backfill_fetch_events_failed",
                        error_type=type(e).__name__,
                        error_message=str(e),
                    )
                    continue
                event_ids = [e.event_id for e in events if e.event_id]
                for wallet in group:
                    try:
                        for event_id in event_ids:
                            if await self._processed.insert_if_absent(wallet.id, event_id):
                                marked += 1
                    except TonTrackerError as e:
                        failed += 1
                        self._logger.warning(
                            "backfill_mark_failed",
                            wallet_id=wallet.id,
                            error_type=type(e).__name__,
                            error_message=str(e),
                        )

        result = SeedResult(
            wallets=len(wallets),
            events_marked=marked,
            failed_wallets=failed,
            interrupted=interrupted,
        )
        self._logger.info(
            "backfill_completed",
            backfill_events_marked=result.events_marked,
            backfill_failed_wallets=result.failed_wallets,
        )
        return result
