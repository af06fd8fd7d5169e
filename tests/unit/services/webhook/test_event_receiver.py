# -*- coding: utf-8 -*-
"""Unit tests for EventReceiver (classification, dedupe, fan-out)."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Any, cast
from unittest.mock import AsyncMock

import pytest
from payloads import RAW_A, RAW_B, event_response, make_event, ton_transfer_response

from ton_tracker.exceptions import StorageError, TonApiError
from ton_tracker.models.event import Event
from ton_tracker.models.wallet import TrackedWallet
from ton_tracker.models.webhook import WebhookPayload
from ton_tracker.persistence.repositories.in_memory import (
    InMemoryProcessedEventRepository,
    InMemoryWalletRepository,
)
from ton_tracker.services.webhook.receiver import EventReceiver, ProcessResult, ReceiveOutcome


def _payload(
    *,
    event_type: str = "account_tx",
    account_id: str = RAW_A,
    tx_hash: str = "hash-1",
    event: dict[str, Any] | None = None,
) -> WebhookPayload:
    body: dict[str, Any] = {"event_type": event_type, "account_id": account_id, "tx_hash": tx_hash, "lt": 42}
    if event is not None:
        body["event"] = event
    return WebhookPayload.from_response(body)


def _receiver(
    tonapi: SimpleNamespace,
    wallet_repo: Any,
    processed_repo: Any,
    handler: Any,
) -> EventReceiver:
    return EventReceiver(
        tonapi=cast(Any, tonapi),
        wallet_repository=wallet_repo,
        processed_event_repository=processed_repo,
        handler=handler,
    )


@pytest.mark.parametrize("event_type", ["mempool_msg", "new_contract"])
async def test_accept_ignores_non_actionable_categories(
    fake_tonapi: SimpleNamespace,
    event_type: str,
) -> None:
    wallets = SimpleNamespace(list_by_address_raw=AsyncMock(return_value=[]))
    receiver = _receiver(fake_tonapi, wallets, InMemoryProcessedEventRepository(), AsyncMock())

    outcome = receiver.accept(_payload(event_type=event_type))
    await receiver.drain()

    assert outcome is ReceiveOutcome.IGNORED
    wallets.list_by_address_raw.assert_not_called()


async def test_accept_rejects_missing_account_without_storage_lookup(
    fake_tonapi: SimpleNamespace,
) -> None:
    wallets = SimpleNamespace(list_by_address_raw=AsyncMock(return_value=[]))
    receiver = _receiver(fake_tonapi, wallets, InMemoryProcessedEventRepository(), AsyncMock())

    outcome = receiver.accept(_payload(account_id="   "))
    await receiver.drain()

    assert outcome is ReceiveOutcome.REJECTED
    wallets.list_by_address_raw.assert_not_called()
    fake_tonapi.get_event_by_hash.assert_not_called()


async def test_accept_schedules_background_processing(
    fake_tonapi: SimpleNamespace,
    wallet_repo: InMemoryWalletRepository,
    processed_repo: InMemoryProcessedEventRepository,
) -> None:
    wallet = await wallet_repo.add(user_id=1, address_raw=RAW_A)
    handler = AsyncMock()
    receiver = _receiver(fake_tonapi, wallet_repo, processed_repo, handler)

    outcome = receiver.accept(_payload(event=event_response("ev-1")))
    assert outcome is ReceiveOutcome.ACCEPTED
    assert receiver.pending == 1
    await receiver.drain()

    assert receiver.pending == 0
    handler.assert_awaited_once()
    dispatched_wallet, dispatched_event = handler.await_args.args
    assert dispatched_wallet == wallet
    assert dispatched_event.event_id == "ev-1"


async def test_process_uses_inline_event_without_fetch(
    fake_tonapi: SimpleNamespace,
    wallet_repo: InMemoryWalletRepository,
    processed_repo: InMemoryProcessedEventRepository,
) -> None:
    wallet = await wallet_repo.add(user_id=1, address_raw=RAW_A)
    handler = AsyncMock()
    receiver = _receiver(fake_tonapi, wallet_repo, processed_repo, handler)

    result = await receiver.process(_payload(event=event_response("ev-inline")))

    assert result == ProcessResult(event_id="ev-inline", matched=1, dispatched=1)
    fake_tonapi.get_event_by_hash.assert_not_called()
    assert await processed_repo.contains(wallet.id, "ev-inline")


async def test_process_fetches_event_by_hash_when_not_inline(
    fake_tonapi: SimpleNamespace,
    wallet_repo: InMemoryWalletRepository,
    processed_repo: InMemoryProcessedEventRepository,
) -> None:
    await wallet_repo.add(user_id=1, address_raw=RAW_A)
    fake_tonapi.get_event_by_hash.return_value = make_event("ev-fetched")
    handler = AsyncMock()
    receiver = _receiver(fake_tonapi, wallet_repo, processed_repo, handler)

    result = await receiver.process(_payload(tx_hash="abc123"))

    fake_tonapi.get_event_by_hash.assert_awaited_once_with("abc123")
    assert result.event_id == "ev-fetched"
    assert result.dispatched == 1


async def test_process_aborts_when_fetch_fails(
    fake_tonapi: SimpleNamespace,
    wallet_repo: InMemoryWalletRepository,
    processed_repo: InMemoryProcessedEventRepository,
) -> None:
    await wallet_repo.add(user_id=1, address_raw=RAW_A)
    fake_tonapi.get_event_by_hash.side_effect = TonApiError("not found", status_code=404)
    handler = AsyncMock()
    receiver = _receiver(fake_tonapi, wallet_repo, processed_repo, handler)

    result = await receiver.process(_payload())

    assert result == ProcessResult(matched=1)
    handler.assert_not_called()
    assert len(processed_repo) == 0


async def test_process_aborts_when_event_has_no_id(
    fake_tonapi: SimpleNamespace,
    wallet_repo: InMemoryWalletRepository,
    processed_repo: InMemoryProcessedEventRepository,
) -> None:
    await wallet_repo.add(user_id=1, address_raw=RAW_A)
    handler = AsyncMock()
    receiver = _receiver(fake_tonapi, wallet_repo, processed_repo, handler)

    result = await receiver.process(_payload(event=event_response("")))

    assert result.dispatched == 0
    handler.assert_not_called()
    assert len(processed_repo) == 0


async def test_process_without_tracking_wallets_does_nothing(
    fake_tonapi: SimpleNamespace,
    wallet_repo: InMemoryWalletRepository,
    processed_repo: InMemoryProcessedEventRepository,
) -> None:
    await wallet_repo.add(user_id=1, address_raw=RAW_B)
    handler = AsyncMock()
    receiver = _receiver(fake_tonapi, wallet_repo, processed_repo, handler)

    result = await receiver.process(_payload(event=event_response("ev-1")))

    assert result == ProcessResult()
    fake_tonapi.get_event_by_hash.assert_not_called()
    handler.assert_not_called()


async def test_duplicate_delivery_dispatches_once(
    fake_tonapi: SimpleNamespace,
    wallet_repo: InMemoryWalletRepository,
    processed_repo: InMemoryProcessedEventRepository,
) -> None:
    await wallet_repo.add(user_id=1, address_raw=RAW_A)
    handler = AsyncMock()
    receiver = _receiver(fake_tonapi, wallet_repo, processed_repo, handler)
    payload = _payload(event=event_response("ev-dup"))

    first = await receiver.process(payload)
    second = await receiver.process(payload)

    assert first.dispatched == 1
    assert second == ProcessResult(event_id="ev-dup", matched=1, duplicates=1)
    handler.assert_awaited_once()


async def test_concurrent_replays_dispatch_exactly_once(
    fake_tonapi: SimpleNamespace,
    wallet_repo: InMemoryWalletRepository,
    processed_repo: InMemoryProcessedEventRepository,
) -> None:
    await wallet_repo.add(user_id=1, address_raw=RAW_A)

    async def fetch(tx_hash: str) -> Event:
        await asyncio.sleep(0)
        return make_event("ev-race")

    fake_tonapi.get_event_by_hash.side_effect = fetch
    handler = AsyncMock()
    receiver = _receiver(fake_tonapi, wallet_repo, processed_repo, handler)

    outcomes = [receiver.accept(_payload()) for _ in range(10)]
    await receiver.drain()

    assert outcomes == [ReceiveOutcome.ACCEPTED] * 10
    handler.assert_awaited_once()
    assert len(processed_repo) == 1


async def test_fan_out_to_every_subscriber_with_isolated_failure(
    fake_tonapi: SimpleNamespace,
    wallet_repo: InMemoryWalletRepository,
    processed_repo: InMemoryProcessedEventRepository,
) -> None:
    w1 = await wallet_repo.add(user_id=1, address_raw=RAW_A)
    w2 = await wallet_repo.add(user_id=2, address_raw=RAW_A)
    w3 = await wallet_repo.add(user_id=3, address_raw=RAW_A)
    delivered: list[int] = []

    async def handler(wallet: TrackedWallet, event: Event) -> None:
        if wallet.user_id == 2:
            raise RuntimeError("channel down")
        delivered.append(wallet.user_id)

    receiver = _receiver(fake_tonapi, wallet_repo, processed_repo, handler)
    event = event_response(
        "ev-fan",
        ton_transfer_response(sender=RAW_B, recipient=RAW_A, amount_nano=10**9),
    )

    result = await receiver.process(_payload(event=event))

    assert sorted(delivered) == [1, 3]
    assert result == ProcessResult(event_id="ev-fan", matched=3, dispatched=2, failed=1)
    for w in (w1, w2, w3):
        assert await processed_repo.contains(w.id, "ev-fan")

    replay = await receiver.process(_payload(event=event))
    assert replay.duplicates == 3
    assert sorted(delivered) == [1, 3]


async def test_late_subscriber_is_notified_once_for_old_event(
    fake_tonapi: SimpleNamespace,
    wallet_repo: InMemoryWalletRepository,
    processed_repo: InMemoryProcessedEventRepository,
) -> None:
    await wallet_repo.add(user_id=1, address_raw=RAW_A)
    handler = AsyncMock()
    receiver = _receiver(fake_tonapi, wallet_repo, processed_repo, handler)
    payload = _payload(event=event_response("ev-1"))
    await receiver.process(payload)

    late = await wallet_repo.add(user_id=2, address_raw=RAW_A)
    result = await receiver.process(payload)

    assert result.dispatched == 1
    assert result.duplicates == 1
    assert handler.await_args.args[0] == late


async def test_ledger_error_skips_only_that_wallet(
    fake_tonapi: SimpleNamespace,
    wallet_repo: InMemoryWalletRepository,
) -> None:
    w1 = await wallet_repo.add(user_id=1, address_raw=RAW_A)
    w2 = await wallet_repo.add(user_id=2, address_raw=RAW_A)
    ledger = InMemoryProcessedEventRepository()
    real_insert = ledger.insert_if_absent

    async def flaky_insert(wallet_id: int, event_id: str) -> bool:
        if wallet_id == w1.id:
            raise StorageError("disk full")
        return await real_insert(wallet_id, event_id)

    processed = SimpleNamespace(insert_if_absent=flaky_insert)
    handler = AsyncMock()
    receiver = _receiver(fake_tonapi, wallet_repo, processed, handler)

    result = await receiver.process(_payload(event=event_response("ev-1")))

    assert result == ProcessResult(event_id="ev-1", matched=2, dispatched=1, failed=1)
    handler.assert_awaited_once()
    assert handler.await_args.args[0] == w2


async def test_wallet_lookup_error_aborts_before_fetch(
    fake_tonapi: SimpleNamespace,
    processed_repo: InMemoryProcessedEventRepository,
) -> None:
    wallets = SimpleNamespace(list_by_address_raw=AsyncMock(side_effect=StorageError("db down")))
    handler = AsyncMock()
    receiver = _receiver(fake_tonapi, wallets, processed_repo, handler)

    result = await receiver.process(_payload())

    assert result == ProcessResult()
    fake_tonapi.get_event_by_hash.assert_not_called()
    handler.assert_not_called()


async def test_unexpected_processing_error_is_contained(
    fake_tonapi: SimpleNamespace,
    processed_repo: InMemoryProcessedEventRepository,
) -> None:
    wallets = SimpleNamespace(list_by_address_raw=AsyncMock(side_effect=RuntimeError("bug")))
    receiver = _receiver(fake_tonapi, wallets, processed_repo, AsyncMock())

    assert receiver.accept(_payload()) is ReceiveOutcome.ACCEPTED
    await receiver.drain()

    assert receiver.pending == 0
