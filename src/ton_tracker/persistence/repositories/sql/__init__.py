"""SQLAlchemy repository implementations."""

from ton_tracker.persistence.repositories.sql.processed_event_repository import (
    SqlProcessedEventRepository,
)
from ton_tracker.persistence.repositories.sql.wallet_repository import SqlWalletRepository

__all__ = [
    "SqlProcessedEventRepository",
    "SqlWalletRepository",
]
