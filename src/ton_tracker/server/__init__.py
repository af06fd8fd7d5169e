"""HTTP server for webhook deliveries."""

from ton_tracker.server.app import WebhookServer

__all__ = ["WebhookServer"]
