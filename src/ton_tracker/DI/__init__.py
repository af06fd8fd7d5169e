"""Dependency injection."""

from ton_tracker.DI.container import Container

__all__ = ["Container"]
