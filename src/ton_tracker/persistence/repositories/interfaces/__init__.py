# -*- coding: utf-8 -*-
"""Repository interfaces (abstractions). Implementations live in in_memory/ and sql/."""

from ton_tracker.persistence.repositories.interfaces.processed_event_repository import (
    IProcessedEventRepository,
)
from ton_tracker.persistence.repositories.interfaces.wallet_repository import (
    IWalletRepository,
)

__all__ = [
    "IProcessedEventRepository",
    "IWalletRepository",
]
