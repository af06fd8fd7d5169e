"""In-memory repository implementations."""

from ton_tracker.persistence.repositories.in_memory.processed_event_repository import (
    InMemoryProcessedEventRepository,
)
from ton_tracker.persistence.repositories.in_memory.wallet_repository import (
    InMemoryWalletRepository,
)

__all__ = [
    "InMemoryProcessedEventRepository",
    "InMemoryWalletRepository",
]
