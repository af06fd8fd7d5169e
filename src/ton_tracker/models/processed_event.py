"""ProcessedEvent: entry of the deduplication ledger.

Identity is (wallet_id, event_id). Existence means the event was already
delivered (or attempted) for that wallet. Entries are append-only.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime


@dataclass(frozen=True, slots=True)
class ProcessedEvent:
    """Record that an upstream event was handled for a wallet."""

    wallet_id: int
    event_id: str
    processed_at: datetime

    @classmethod
    def create(
        cls,
        wallet_id: int,
        event_id: str,
        *,
        processed_at: datetime | None = None,
    ) -> ProcessedEvent:
        """Create a ledger entry; event_id must be non-empty."""
        event_id = event_id.strip()
        if not event_id:
            raise ValueError("event_id must be non-empty")
        return cls(
            wallet_id=wallet_id,
            event_id=event_id,
            processed_at=processed_at or datetime.now(UTC),
        )
