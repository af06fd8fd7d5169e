"""Event receiver: turns webhook pushes into deduplicated per-wallet dispatches."""

from __future__ import annotations

import asyncio
import enum
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog
from structlog.contextvars import bound_contextvars

from ton_tracker.exceptions import TonTrackerError
from ton_tracker.models.event import Event
from ton_tracker.models.wallet import TrackedWallet
from ton_tracker.models.webhook import WebhookPayload
from ton_tracker.utils.validation import mask_address, truncate

if TYPE_CHECKING:
    from ton_tracker.clients.tonapi import TonApiClient
    from ton_tracker.persistence.repositories.interfaces import (
        IProcessedEventRepository,
        IWalletRepository,
    )

EventHandler = Callable[[TrackedWallet, Event], Awaitable[Any]]


class ReceiveOutcome(enum.StrEnum):
    ACCEPTED = "accepted"
    """Scheduled for background processing."""
    IGNORED = "ignored"
    """Non-actionable category (mempool_msg, new_contract)."""
    REJECTED = "rejected"
    """Missing account_id; no storage lookup is done."""


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of processing one payload."""

    event_id: str | None = None
    matched: int = 0
    """Wallets tracking the payload's account."""
    dispatched: int = 0
    """Handler invocations that completed."""
    duplicates: int = 0
    """Wallets for which the event was already in the ledger."""
    failed: int = 0
    """Handler invocations that raised, plus ledger write failures."""


class EventReceiver:
    """Resolves a webhook push to (wallet, event) pairs and dispatches new ones.

    For each wallet tracking the account, the (wallet_id, event_id) pair is
    recorded atomically before dispatch; only a fresh insert dispatches, so
    duplicate deliveries and concurrent replays notify at most once. A handler
    failure is logged and does not affect other wallets. The entry stays
    recorded (at-most-once).
    """

    def __init__(
        self,
        tonapi: TonApiClient,
        wallet_repository: IWalletRepository,
        processed_event_repository: IProcessedEventRepository,
        handler: EventHandler,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        self._tonapi = tonapi
        self._wallets = wallet_repository
        self._processed = processed_event_repository
        self._handler = handler
        self._logger = get_logger(logger_name or self.__class__.__name__)
        self._tasks: set[asyncio.Task[ProcessResult]] = set()

    @property
    def pending(self) -> int:
        """Number of payloads still being processed in the background."""
        return len(self._tasks)

    def accept(self, payload: WebhookPayload) -> ReceiveOutcome:
        """Classify a payload and schedule processing without awaiting it.

        Must be called from the running event loop. The caller acknowledges the
        upstream delivery right away, whatever the outcome.
        """
        if payload.is_ignored:
            self._logger.debug("webhook_payload_ignored", webhook_event_type=payload.event_type)
            return ReceiveOutcome.IGNORED
        if not payload.account_id:
            self._logger.warning(
                "webhook_payload_rejected",
                reason="missing_account_id",
                webhook_event_type=payload.event_type,
            )
            return ReceiveOutcome.REJECTED

        task = asyncio.create_task(self._process_logged(payload))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return ReceiveOutcome.ACCEPTED

    async def drain(self) -> None:
        """Wait for every in-flight background processing task."""
        while self._tasks:
            await asyncio.gather(*tuple(self._tasks), return_exceptions=True)

    async def _process_logged(self, payload: WebhookPayload) -> ProcessResult:
        try:
            return await self.process(payload)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._logger.exception(
                "webhook_processing_failed",
                webhook_account_masked=mask_address(payload.account_id),
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return ProcessResult()

    async def process(self, payload: WebhookPayload) -> ProcessResult:
        """Resolve, deduplicate and dispatch one payload."""
        if payload.is_ignored or not payload.account_id:
            return ProcessResult()

        with bound_contextvars(
            webhook_account_masked=mask_address(payload.account_id),
            webhook_tx_hash=truncate(payload.tx_hash, 10),
        ):
            try:
                wallets = await self._wallets.list_by_address_raw(payload.account_id)
            except TonTrackerError as e:
                self._logger.error(
                    "webhook_wallet_lookup_failed",
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                return ProcessResult()
            if not wallets:
                self._logger.debug("webhook_no_tracking_wallets")
                return ProcessResult()

            event = await self._resolve_event(payload)
            if event is None:
                return ProcessResult(matched=len(wallets))
            if not event.event_id:
                self._logger.warning("webhook_event_without_id")
                return ProcessResult(matched=len(wallets))

            with bound_contextvars(webhook_event_id=truncate(event.event_id, 10)):
                fresh: list[TrackedWallet] = []
                duplicates = 0
                failed = 0
                for wallet in wallets:
                    try:
                        inserted = await self._processed.insert_if_absent(wallet.id, event.event_id)
                    except TonTrackerError as e:
                        failed += 1
                        self._logger.error(
                            "webhook_ledger_insert_failed",
                            wallet_id=wallet.id,
                            error_type=type(e).__name__,
                            error_message=str(e),
                        )
                        continue
                    if inserted:
                        fresh.append(wallet)
                    else:
                        duplicates += 1

                outcomes: list[bool] = []
                if fresh:
                    async with asyncio.TaskGroup() as tg:
                        for wallet in fresh:
                            tg.create_task(self._dispatch(wallet, event, outcomes))

                dispatched = sum(1 for ok in outcomes if ok)
                failed += len(outcomes) - dispatched
                self._logger.info(
                    "webhook_event_processed",
                    webhook_wallets_matched=len(wallets),
                    webhook_dispatched=dispatched,
                    webhook_duplicates=duplicates,
                    webhook_failed=failed,
                )
                return ProcessResult(
                    event_id=event.event_id,
                    matched=len(wallets),
                    dispatched=dispatched,
                    duplicates=duplicates,
                    failed=failed,
                )

    async def _resolve_event(self, payload: WebhookPayload) -> Event | None:
        """Use the inline event when present, otherwise fetch it by tx hash."""
        if payload.event is not None:
            return payload.event
        if not payload.tx_hash:
            self._logger.warning("webhook_payload_without_event_or_hash")
            return None
        try:
            return await self._tonapi.get_event_by_hash(payload.tx_hash)
        except TonTrackerError as e:
            self._logger.error(
                "webhook_event_fetch_failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return None

    async def _dispatch(self, wallet: TrackedWallet, event: Event, outcomes: list[bool]) -> None:
        with bound_contextvars(wallet_id=wallet.id, user_id=wallet.user_id):
            try:
                await self._handler(wallet, event)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                outcomes.append(False)
                self._logger.exception(
                    "webhook_dispatch_failed",
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                return
            outcomes.append(True)
