"""Logging setup (structlog on top of stdlib handlers, optional Logfire)."""
