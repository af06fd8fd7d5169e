"""HTTP and API clients."""

from ton_tracker.clients.http import AsyncHttpClient
from ton_tracker.clients.throttle import RequestThrottle
from ton_tracker.clients.tonapi import TonApiClient

__all__ = [
    "AsyncHttpClient",
    "RequestThrottle",
    "TonApiClient",
]
