# -*- coding: utf-8 -*-
"""Domain models."""

from ton_tracker.models.event import (
    AccountInfo,
    AccountRef,
    Action,
    Event,
    JettonInfo,
    JettonSwap,
    TonTransfer,
)
from ton_tracker.models.processed_event import ProcessedEvent
from ton_tracker.models.wallet import TrackedWallet
from ton_tracker.models.webhook import IGNORED_EVENT_TYPES, WebhookPayload, WebhookRegistration

__all__ = [
    "AccountInfo",
    "AccountRef",
    "Action",
    "Event",
    "IGNORED_EVENT_TYPES",
    "JettonInfo",
    "JettonSwap",
    "ProcessedEvent",
    "TonTransfer",
    "TrackedWallet",
    "WebhookPayload",
    "WebhookRegistration",
]
