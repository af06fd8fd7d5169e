"""Webhook subscription sync and inbound event processing."""

from ton_tracker.services.webhook.receiver import (
    EventHandler,
    EventReceiver,
    ProcessResult,
    ReceiveOutcome,
)
from ton_tracker.services.webhook.reconcile import ReconcilePlan, reconcile
from ton_tracker.services.webhook.synchronizer import (
    SubscriptionSynchronizer,
    SyncResult,
    SyncState,
)

__all__ = [
    "EventHandler",
    "EventReceiver",
    "ProcessResult",
    "ReceiveOutcome",
    "ReconcilePlan",
    "SubscriptionSynchronizer",
    "SyncResult",
    "SyncState",
    "reconcile",
]
