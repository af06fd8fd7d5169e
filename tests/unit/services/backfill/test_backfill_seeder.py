# -*- coding: utf-8 -*-
"""Unit tests for BackfillSeeder, including restart suppression."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any, cast
from unittest.mock import AsyncMock

from payloads import RAW_A, RAW_B, event_response, make_event

from ton_tracker.config import Settings
from ton_tracker.exceptions import StorageError, TonApiError
from ton_tracker.models.webhook import WebhookPayload
from ton_tracker.persistence.repositories.in_memory import (
    InMemoryProcessedEventRepository,
    InMemoryWalletRepository,
)
from ton_tracker.services.backfill.seeder import BackfillSeeder, SeedResult
from ton_tracker.services.webhook.receiver import EventReceiver


def _seeder(
    settings: Settings,
    tonapi: SimpleNamespace,
    wallet_repo: Any,
    processed_repo: Any,
) -> BackfillSeeder:
    return BackfillSeeder(
        settings=settings,
        tonapi=cast(Any, tonapi),
        wallet_repository=wallet_repo,
        processed_event_repository=processed_repo,
    )


async def test_seed_marks_recent_events_for_every_wallet(
    settings: Settings,
    fake_tonapi: SimpleNamespace,
    wallet_repo: InMemoryWalletRepository,
    processed_repo: InMemoryProcessedEventRepository,
) -> None:
    w1 = await wallet_repo.add(user_id=1, address_raw=RAW_A)
    w2 = await wallet_repo.add(user_id=2, address_raw=RAW_A)
    w3 = await wallet_repo.add(user_id=1, address_raw=RAW_B)
    fake_tonapi.get_events.side_effect = lambda address, limit: {
        RAW_A: [make_event("a1"), make_event("a2")],
        RAW_B: [make_event("b1")],
    }[address]

    result = await _seeder(settings, fake_tonapi, wallet_repo, processed_repo).seed()

    assert result == SeedResult(wallets=3, events_marked=5, failed_wallets=0)
    assert fake_tonapi.get_events.await_count == 2
    for w, event_id in ((w1, "a1"), (w1, "a2"), (w2, "a1"), (w2, "a2"), (w3, "b1")):
        assert await processed_repo.contains(w.id, event_id)


async def test_seed_uses_configured_limit_and_skips_empty_ids(
    settings_factory: Callable[..., Settings],
    fake_tonapi: SimpleNamespace,
    wallet_repo: InMemoryWalletRepository,
    processed_repo: InMemoryProcessedEventRepository,
) -> None:
    settings = settings_factory(backfill={"events_limit": 3})
    await wallet_repo.add(user_id=1, address_raw=RAW_A)
    fake_tonapi.get_events.return_value = [make_event(""), make_event("a1")]

    result = await _seeder(settings, fake_tonapi, wallet_repo, processed_repo).seed()

    fake_tonapi.get_events.assert_awaited_once_with(RAW_A, limit=3)
    assert result.events_marked == 1
    assert len(processed_repo) == 1


async def test_seed_counts_only_new_entries(
    settings: Settings,
    fake_tonapi: SimpleNamespace,
    wallet_repo: InMemoryWalletRepository,
    processed_repo: InMemoryProcessedEventRepository,
) -> None:
    w = await wallet_repo.add(user_id=1, address_raw=RAW_A)
    await processed_repo.insert_if_absent(w.id, "a1")
    fake_tonapi.get_events.return_value = [make_event("a1"), make_event("a2")]

    result = await _seeder(settings, fake_tonapi, wallet_repo, processed_repo).seed()

    assert result.events_marked == 1


async def test_seed_continues_after_fetch_failure(
    settings: Settings,
    fake_tonapi: SimpleNamespace,
    wallet_repo: InMemoryWalletRepository,
    processed_repo: InMemoryProcessedEventRepository,
) -> None:
    await wallet_repo.add(user_id=1, address_raw=RAW_A)
    w2 = await wallet_repo.add(user_id=2, address_raw=RAW_B)

    async def get_events(address: str, limit: int) -> list[Any]:
        if address == RAW_A:
            raise TonApiError("rate limited", status_code=429)
        return [make_event("b1")]

    fake_tonapi.get_events.side_effect = get_events

    result = await _seeder(settings, fake_tonapi, wallet_repo, processed_repo).seed()

    assert result == SeedResult(wallets=2, events_marked=1, failed_wallets=1)
    assert await processed_repo.contains(w2.id, "b1")


async def test_seed_returns_empty_result_when_wallets_unavailable(
    settings: Settings,
    fake_tonapi: SimpleNamespace,
    processed_repo: InMemoryProcessedEventRepository,
) -> None:
    wallets = SimpleNamespace(list_all=AsyncMock(side_effect=StorageError("db down")))

    result = await _seeder(settings, fake_tonapi, wallets, processed_repo).seed()

    assert result == SeedResult()
    fake_tonapi.get_events.assert_not_called()


async def test_seed_disabled_does_nothing(
    settings_factory: Callable[..., Settings],
    fake_tonapi: SimpleNamespace,
    wallet_repo: InMemoryWalletRepository,
    processed_repo: InMemoryProcessedEventRepository,
) -> None:
    await wallet_repo.add(user_id=1, address_raw=RAW_A)
    settings = settings_factory(backfill={"enabled": False})

    result = await _seeder(settings, fake_tonapi, wallet_repo, processed_repo).seed()

    assert result == SeedResult()
    fake_tonapi.get_events.assert_not_called()


async def test_backfilled_history_is_not_notified_but_new_event_is(
    settings: Settings,
    fake_tonapi: SimpleNamespace,
    wallet_repo: InMemoryWalletRepository,
    processed_repo: InMemoryProcessedEventRepository,
) -> None:
    await wallet_repo.add(user_id=1, address_raw=RAW_A)
    fake_tonapi.get_events.return_value = [make_event(f"old-{i}") for i in range(3)]
    await _seeder(settings, fake_tonapi, wallet_repo, processed_repo).seed()

    handler = AsyncMock()
    receiver = EventReceiver(
        tonapi=cast(Any, fake_tonapi),
        wallet_repository=wallet_repo,
        processed_event_repository=processed_repo,
        handler=handler,
    )
    for event_id in ("old-0", "old-1", "old-2", "new-3"):
        receiver.accept(
            WebhookPayload.from_response(
                {"event_type": "account_tx", "account_id": RAW_A, "event": event_response(event_id)}
            )
        )
    await receiver.drain()

    handler.assert_awaited_once()
    assert handler.await_args.args[1].event_id == "new-3"


async def test_seed_stops_fetching_once_shutdown_is_set(
    settings: Settings,
    fake_tonapi: SimpleNamespace,
    wallet_repo: InMemoryWalletRepository,
    processed_repo: InMemoryProcessedEventRepository,
) -> None:
    w1 = await wallet_repo.add(user_id=1, address_raw=RAW_A)
    await wallet_repo.add(user_id=1, address_raw=RAW_B)
    shutdown = asyncio.Event()

    async def _get_events(address: str, limit: int) -> list[Any]:
        shutdown.set()
        return [make_event("a1")]

    fake_tonapi.get_events.side_effect = _get_events

    result = await _seeder(settings, fake_tonapi, wallet_repo, processed_repo).seed(shutdown)

    assert fake_tonapi.get_events.await_count == 1
    fake_tonapi.get_events.assert_awaited_once_with(RAW_A, limit=settings.backfill.events_limit)
    assert result.interrupted is True
    assert result.events_marked == 1
    assert await processed_repo.contains(w1.id, "a1")


async def test_seed_makes_no_upstream_call_when_shutdown_already_set(
    settings: Settings,
    fake_tonapi: SimpleNamespace,
    wallet_repo: InMemoryWalletRepository,
    processed_repo: InMemoryProcessedEventRepository,
) -> None:
    await wallet_repo.add(user_id=1, address_raw=RAW_A)
    shutdown = asyncio.Event()
    shutdown.set()

    result = await _seeder(settings, fake_tonapi, wallet_repo, processed_repo).seed(shutdown)

    fake_tonapi.get_events.assert_not_called()
    assert result == SeedResult(wallets=1, interrupted=True)
