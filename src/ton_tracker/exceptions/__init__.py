"""Exceptions subpackage."""

from ton_tracker.exceptions.exceptions import (
    MissingRequiredConfigError,
    StorageError,
    TonApiError,
    TonTrackerError,
)

__all__ = [
    "MissingRequiredConfigError",
    "StorageError",
    "TonApiError",
    "TonTrackerError",
]
