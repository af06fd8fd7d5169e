"""TON wallet tracker: webhook-driven notifications for tracked TON addresses."""

from ton_tracker.clients import AsyncHttpClient, RequestThrottle, TonApiClient
from ton_tracker.config import get_settings
from ton_tracker.DI import Container
from ton_tracker.services import EventReceiver, SubscriptionSynchronizer

__version__ = "0.1.0"
__all__ = [
    "AsyncHttpClient",
    "Container",
    "EventReceiver",
    "RequestThrottle",
    "SubscriptionSynchronizer",
    "TonApiClient",
    "get_settings",
]
