"""Application services: subscription sync, event receiving, backfill, notifications."""

from ton_tracker.services.backfill import BackfillSeeder, SeedResult
from ton_tracker.services.notifier import EventNotifier, NotifyResult
from ton_tracker.services.webhook import (
    EventReceiver,
    ProcessResult,
    ReceiveOutcome,
    ReconcilePlan,
    SubscriptionSynchronizer,
    SyncResult,
    SyncState,
    reconcile,
)

__all__ = [
    "BackfillSeeder",
    "EventNotifier",
    "EventReceiver",
    "NotifyResult",
    "ProcessResult",
    "ReceiveOutcome",
    "ReconcilePlan",
    "SeedResult",
    "SubscriptionSynchronizer",
    "SyncResult",
    "SyncState",
    "reconcile",
]
