"""Custom exceptions for TonAPI access, storage and configuration."""

from __future__ import annotations


class TonTrackerError(Exception):
    """Base exception for tracker errors."""

    pass


class MissingRequiredConfigError(TonTrackerError):
    """Raised when a required configuration value is missing."""

    pass


class TonApiError(TonTrackerError):
    """Raised when a TonAPI request fails (transport error or status >= 400)."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        method: str | None = None,
        status_code: int | None = None,
        body: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.method = method
        self.status_code = status_code
        self.body = body
        self.cause = cause


class StorageError(TonTrackerError):
    """Raised when a storage backend operation fails."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause
