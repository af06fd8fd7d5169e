"""TonAPI client."""

from ton_tracker.clients.tonapi.tonapi import TonApiClient

__all__ = ["TonApiClient"]
