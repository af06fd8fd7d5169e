"""Abstract interface for the processed-event ledger (deduplication)."""

from __future__ import annotations

from abc import ABC, abstractmethod


class IProcessedEventRepository(ABC):
    """Interface for the append-only (wallet_id, event_id) ledger."""

    @abstractmethod
    async def insert_if_absent(self, wallet_id: int, event_id: str) -> bool:
        """Atomically record (wallet_id, event_id). Returns True only if it was newly inserted.

        The return value is the deduplication decision: implementations must not
        split this into a read followed by a write.
        """
        ...

    @abstractmethod
    async def contains(self, wallet_id: int, event_id: str) -> bool:
        """Return True if (wallet_id, event_id) is in the ledger."""
        ...
