"""Abstract interface for tracked wallet storage (in-memory, SQL, etc.)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ton_tracker.models.wallet import TrackedWallet


class IWalletRepository(ABC):
    """Interface for TrackedWallet storage. Source of truth for the tracked address set."""

    @abstractmethod
    async def list_all(self) -> list[TrackedWallet]:
        """Return every tracked wallet."""
        ...

    @abstractmethod
    async def list_by_address_raw(self, address_raw: str) -> list[TrackedWallet]:
        """Return all wallets (one per subscriber) tracking the given raw address."""
        ...

    @abstractmethod
    async def add(
        self,
        *,
        user_id: int,
        address_raw: str,
        address_display: str | None = None,
        name: str = "",
    ) -> TrackedWallet:
        """Store a new wallet for user_id and return it with its assigned id."""
        ...

    @abstractmethod
    async def remove(self, wallet_id: int) -> bool:
        """Delete a wallet (and its processed events). Returns False if it did not exist."""
        ...

    @abstractmethod
    async def set_min_amount(self, wallet_id: int, amount: float | None) -> TrackedWallet | None:
        """Set or clear (None) the wallet's min_amount_ton filter. None if wallet missing."""
        ...

    async def list_addresses(self) -> set[str]:
        """Return the set of raw addresses across all wallets."""
        return {w.address_raw for w in await self.list_all()}
