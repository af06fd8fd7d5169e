# -*- coding: utf-8 -*-
"""Process-wide minimum-interval throttle for outbound requests."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable


class RequestThrottle:
    """Serializes callers so consecutive requests start at least min_interval apart.

    One instance is shared by every caller of the upstream API. The lock covers
    only the timestamp bookkeeping and the sleep, never the request itself.
    The timestamp is stamped when a caller is released, so failed requests
    count the same as successful ones.
    """

    def __init__(
        self,
        min_interval: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the throttle.

        Args:
            min_interval: Minimum seconds between two released callers (<= 0 disables waiting).
            clock: Monotonic clock (injected for tests).
            sleep: Async sleep (injected for tests).
        """
        self._min_interval = max(0.0, min_interval)
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._last_call: float | None = None

    @property
    def min_interval(self) -> float:
        return self._min_interval

    @property
    def last_call(self) -> float | None:
        """Clock value at which the previous caller was released (None before the first call)."""
        return self._last_call

    async def wait(self) -> float:
        """Suspend until the caller may issue its request. Returns seconds waited.

        Cancellation while sleeping leaves the timestamp untouched.
        """
        async with self._lock:
            now = self._clock()
            waited = 0.0
            if self._last_call is not None:
                remaining = self._min_interval - (now - self._last_call)
                if remaining > 0:
                    await self._sleep(remaining)
                    waited = remaining
                    now = self._clock()
            self._last_call = now
            return waited
