# -*- coding: utf-8 -*-
"""Repositories: interfaces (abstractions) and implementations (in_memory, sql)."""

from ton_tracker.persistence.repositories.interfaces import (
    IProcessedEventRepository,
    IWalletRepository,
)
from ton_tracker.persistence.repositories.in_memory import (
    InMemoryProcessedEventRepository,
    InMemoryWalletRepository,
)
from ton_tracker.persistence.repositories.sql import (
    SqlProcessedEventRepository,
    SqlWalletRepository,
)

__all__ = [
    "IProcessedEventRepository",
    "IWalletRepository",
    "InMemoryProcessedEventRepository",
    "InMemoryWalletRepository",
    "SqlProcessedEventRepository",
    "SqlWalletRepository",
]
