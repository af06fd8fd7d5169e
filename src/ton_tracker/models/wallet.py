"""TrackedWallet: a TON address a subscriber asked to be notified about.

Identity is the storage id. Several subscribers may track the same raw
address; each (user, address) pairing is its own wallet row and gets its own
deduplication state.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, datetime


@dataclass(frozen=True, slots=True)
class TrackedWallet:
    """A subscription: one subscriber tracking one address."""

    id: int
    """Storage identifier (wallet_id in the processed-event ledger)."""
    user_id: int
    """Owning subscriber (Telegram chat/user id)."""
    name: str
    address_raw: str
    """Raw form (0:...), matches webhook account_id."""
    address_display: str
    """User-friendly form (UQ.../EQ...)."""
    min_amount_ton: float | None = None
    """Optional per-wallet filter; events below this TON amount are not notified."""
    created_at: datetime | None = None

    @classmethod
    def create(
        cls,
        *,
        id: int,
        user_id: int,
        address_raw: str,
        address_display: str | None = None,
        name: str = "",
        min_amount_ton: float | None = None,
        created_at: datetime | None = None,
    ) -> TrackedWallet:
        """Create a wallet record; address_display defaults to address_raw."""
        address_raw = address_raw.strip()
        if not address_raw:
            raise ValueError("address_raw must be non-empty")
        return cls(
            id=id,
            user_id=user_id,
            name=name.strip(),
            address_raw=address_raw,
            address_display=(address_display or address_raw).strip(),
            min_amount_ton=min_amount_ton,
            created_at=created_at or datetime.now(UTC),
        )

    def with_min_amount(self, amount: float | None) -> TrackedWallet:
        """Return a copy with min_amount_ton set (None clears the filter)."""
        return replace(self, min_amount_ton=amount)
