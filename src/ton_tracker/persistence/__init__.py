"""Persistence layer (database, repositories)."""

from ton_tracker.persistence.database import Database
from ton_tracker.persistence.repositories import (
    IProcessedEventRepository,
    InMemoryProcessedEventRepository,
    InMemoryWalletRepository,
    IWalletRepository,
    SqlProcessedEventRepository,
    SqlWalletRepository,
)

__all__ = [
    "Database",
    "IProcessedEventRepository",
    "IWalletRepository",
    "InMemoryProcessedEventRepository",
    "InMemoryWalletRepository",
    "SqlProcessedEventRepository",
    "SqlWalletRepository",
]
