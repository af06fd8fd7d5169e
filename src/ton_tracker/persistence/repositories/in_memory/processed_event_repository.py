# -*- coding: utf-8 -*-
"""In-memory processed-event ledger (keyed by (wallet_id, event_id))."""

from __future__ import annotations

from ton_tracker.models.processed_event import ProcessedEvent
from ton_tracker.persistence.repositories.interfaces.processed_event_repository import (
    IProcessedEventRepository,
)


def _key(wallet_id: int, event_id: str) -> tuple[int, str]:
    """Normalize key for storage."""
    return (wallet_id, event_id.strip())


class InMemoryProcessedEventRepository(IProcessedEventRepository):
    """In-memory implementation of IProcessedEventRepository.

    insert_if_absent has no await point between check and set, so it is
    atomic with respect to other coroutines on the same event loop.
    """

    def __init__(self) -> None:
        """Initialize an empty in-memory ledger."""
        self._store: dict[tuple[int, str], ProcessedEvent] = {}

    async def insert_if_absent(self, wallet_id: int, event_id: str) -> bool:
        k = _key(wallet_id, event_id)
        if k in self._store:
            return False
        self._store[k] = ProcessedEvent.create(wallet_id, event_id)
        return True

    async def contains(self, wallet_id: int, event_id: str) -> bool:
        return _key(wallet_id, event_id) in self._store

    def purge_wallet(self, wallet_id: int) -> int:
        """Drop all entries of a wallet. Returns the number removed."""
        keys = [k for k in self._store if k[0] == wallet_id]
        for k in keys:
            del self._store[k]
        return len(keys)

    def __len__(self) -> int:
        return len(self._store)
