# -*- coding: utf-8 -*-
"""In-memory wallet repository (keyed by wallet id)."""

from __future__ import annotations

from typing import Optional

from ton_tracker.models.wallet import TrackedWallet
from ton_tracker.persistence.repositories.in_memory.processed_event_repository import (
    InMemoryProcessedEventRepository,
)
from ton_tracker.persistence.repositories.interfaces.wallet_repository import (
    IWalletRepository,
)


class InMemoryWalletRepository(IWalletRepository):
    """In-memory implementation of IWalletRepository."""

    def __init__(
        self,
        processed_events: Optional[InMemoryProcessedEventRepository] = None,
    ) -> None:
        """Initialize an empty store.

        Args:
            processed_events: Optional ledger whose entries are purged when a wallet is removed.
        """
        self._store: dict[int, TrackedWallet] = {}
        self._next_id = 1
        self._processed_events = processed_events

    async def list_all(self) -> list[TrackedWallet]:
        return list(self._store.values())

    async def list_by_address_raw(self, address_raw: str) -> list[TrackedWallet]:
        address_raw = address_raw.strip()
        return [w for w in self._store.values() if w.address_raw == address_raw]

    async def add(
        self,
        *,
        user_id: int,
        address_raw: str,
        address_display: str | None = None,
        name: str = "",
    ) -> TrackedWallet:
        wallet = TrackedWallet.create(
            id=self._next_id,
            user_id=user_id,
            address_raw=address_raw,
            address_display=address_display,
            name=name,
        )
        self._store[wallet.id] = wallet
        self._next_id += 1
        return wallet

    async def remove(self, wallet_id: int) -> bool:
        if self._store.pop(wallet_id, None) is None:
            return False
        if self._processed_events is not None:
            self._processed_events.purge_wallet(wallet_id)
        return True

    async def set_min_amount(self, wallet_id: int, amount: float | None) -> TrackedWallet | None:
        wallet = self._store.get(wallet_id)
        if wallet is None:
            return None
        updated = wallet.with_min_amount(amount)
        self._store[wallet_id] = updated
        return updated
