"""Downstream handler: turn a newly seen (wallet, event) into subscriber notifications."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog

from ton_tracker.models.event import Event
from ton_tracker.models.wallet import TrackedWallet
from ton_tracker.notifications.types import NotificationMessage
from ton_tracker.services.notifier.extract import extract_swaps, extract_transfers

if TYPE_CHECKING:
    from ton_tracker.config import Settings
    from ton_tracker.notifications.types import NotificationSink, NotificationStyler


@dataclass(frozen=True)
class NotifyResult:
    """Outcome of handling one event for one wallet."""

    sent: int = 0
    failed: int = 0
    filtered: int = 0


def _wallet_payload(wallet: TrackedWallet) -> dict[str, Any]:
    return {
        "id": wallet.id,
        "name": wallet.name,
        "address_raw": wallet.address_raw,
        "address_display": wallet.address_display,
    }


class EventNotifier:
    """Extracts swaps/transfers, applies amount filters and delivers rendered text.

    Swaps are notified first. Transfers are notified only when the event has no
    swap, since a swap also produces fee/transfer actions.
    """

    def __init__(
        self,
        settings: Settings,
        sink: NotificationSink,
        styler: NotificationStyler,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        self._settings = settings
        self._sink = sink
        self._styler = styler
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def handle_event(self, wallet: TrackedWallet, event: Event) -> NotifyResult:
        """Notify wallet's subscriber about event. Delivery failures are counted, not raised."""
        self._logger.info(
            "notifier_handling_event",
            event_id=event.event_id,
            wallet_id=wallet.id,
            user_id=wallet.user_id,
            event_actions_count=len(event.actions),
        )
        min_amount = wallet.min_amount_ton
        messages: list[NotificationMessage] = []
        filtered = 0

        swaps = extract_swaps(event)
        for swap in swaps:
            if min_amount is not None and swap.ton_amount < min_amount:
                self._logger.debug(
                    "notifier_swap_below_min_amount",
                    swap_ton_amount=swap.ton_amount,
                    wallet_min_amount=min_amount,
                )
                filtered += 1
                continue
            messages.append(
                NotificationMessage(
                    event_type="swap",
                    user_id=wallet.user_id,
                    payload={"wallet": _wallet_payload(wallet), "swap": swap.to_dict()},
                )
            )

        if not swaps:
            floor = self._settings.filters.min_transfer_ton
            for transfer in extract_transfers(event, wallet.address_raw):
                if min_amount is not None and transfer.amount < min_amount:
                    filtered += 1
                    continue
                if transfer.amount < floor:
                    filtered += 1
                    continue
                messages.append(
                    NotificationMessage(
                        event_type="transfer",
                        user_id=wallet.user_id,
                        payload={"wallet": _wallet_payload(wallet), "transfer": transfer.to_dict()},
                    )
                )

        sent = failed = 0
        for message in messages:
            if await self._sink.deliver(message.user_id, self._styler.render(message)):
                sent += 1
            else:
                failed += 1
                self._logger.error(
                    "notifier_send_failed",
                    event_id=event.event_id,
                    wallet_id=wallet.id,
                    notification_event_type=message.event_type,
                )
        return NotifyResult(sent=sent, failed=failed, filtered=filtered)
