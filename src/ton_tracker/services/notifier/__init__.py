"""Event notifier: downstream handler of the receiver."""

from ton_tracker.services.notifier.event_notifier import EventNotifier, NotifyResult
from ton_tracker.services.notifier.extract import (
    Swap,
    Transfer,
    extract_swaps,
    extract_transfers,
)

__all__ = [
    "EventNotifier",
    "NotifyResult",
    "Swap",
    "Transfer",
    "extract_swaps",
    "extract_transfers",
]
