# -*- coding: utf-8 -*-
"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from pathlib import Path
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock

import pytest
from payloads import RAW_A

from ton_tracker.config import Settings
from ton_tracker.persistence.database import Database
from ton_tracker.persistence.repositories.in_memory import (
    InMemoryProcessedEventRepository,
    InMemoryWalletRepository,
)


@pytest.fixture
def raw_address() -> str:
    """Default tracked raw address used by tests."""
    return RAW_A


@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    """Build Settings with nested overrides, e.g. settings_factory(webhook={"endpoint": "..."})."""

    def _build(**overrides: Any) -> Settings:
        overrides.setdefault("logging", {"logfire_enabled": False})
        overrides.setdefault("telegram", {"enabled": False})
        return Settings(**overrides)

    return _build


@pytest.fixture
def settings(settings_factory: Callable[..., Settings]) -> Settings:
    """Settings with sync enabled and no startup delay."""
    return settings_factory(
        webhook={
            "endpoint": "https://tracker.example.org/webhook",
            "sync_interval_seconds": 0.1,
            "sync_startup_delay_seconds": 0.0,
        },
        tonapi={"base_url": "https://tonapi.test/v2", "min_request_interval_seconds": 0.0},
    )


@pytest.fixture
def processed_repo() -> InMemoryProcessedEventRepository:
    """Fresh in-memory processed-event ledger per test."""
    return InMemoryProcessedEventRepository()


@pytest.fixture
def wallet_repo(processed_repo: InMemoryProcessedEventRepository) -> InMemoryWalletRepository:
    """Fresh in-memory wallet repository sharing the ledger fixture."""
    return InMemoryWalletRepository(processed_events=processed_repo)


@pytest.fixture
def fake_tonapi() -> SimpleNamespace:
    """TonApiClient stand-in with AsyncMock methods (no upstream webhooks, no events)."""
    return SimpleNamespace(
        list_webhooks=AsyncMock(return_value=[]),
        create_webhook=AsyncMock(),
        delete_webhook=AsyncMock(),
        subscribe_accounts=AsyncMock(return_value=None),
        unsubscribe_accounts=AsyncMock(return_value=None),
        get_events=AsyncMock(return_value=[]),
        get_event_by_hash=AsyncMock(),
        get_account_info=AsyncMock(),
    )


@pytest.fixture
async def database(tmp_path: Path, settings: Settings) -> AsyncIterator[Database]:
    """SQLite file database with tables created; disposed after the test."""
    db = Database(settings, url=f"sqlite+aiosqlite:///{tmp_path / 'tracker.db'}")
    await db.init()
    try:
        yield db
    finally:
        await db.dispose()
