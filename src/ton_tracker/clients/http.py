# -*- coding: utf-8 -*-
"""Async HTTP client for TonAPI: one throttled request primitive, no retries."""

from __future__ import annotations

import asyncio
import uuid
import aiohttp
import structlog
from typing import Any, Callable, Dict, Optional
from structlog.contextvars import bound_contextvars

from ton_tracker.clients.throttle import RequestThrottle
from ton_tracker.config import Settings
from ton_tracker.exceptions import TonApiError
from ton_tracker.utils.validation import truncate

_ERROR_BODY_MAX = 500


class AsyncHttpClient:
    """Async HTTP client for TonAPI.

    Every call goes through the shared RequestThrottle before it is sent.
    Status codes >= 400, transport errors and undecodable bodies surface as
    TonApiError; nothing is retried here (callers retry on their next cycle).

    Injects Settings and optionally an aiohttp.ClientSession. If no session
    is provided, one is created and must be closed via aclose() or used
    as an async context manager.
    """

    def __init__(
        self,
        settings: Settings,
        throttle: RequestThrottle,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Configuration (tonapi.timeout_seconds, tonapi.api_key).
            throttle: Process-wide throttle shared with every other caller.
            session: Optional shared aiohttp session. If None, the client
                creates and owns a session (call aclose() when done).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._settings = settings
        self._throttle = throttle
        self._session = session
        self._owns_session = session is None
        self._logger = get_logger(logger_name or self.__class__.__name__)

    @property
    def throttle(self) -> RequestThrottle:
        return self._throttle

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._settings.tonapi.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session

    async def aclose(self) -> None:
        """Close the session if this client owns it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> AsyncHttpClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    def _headers(self, *, has_body: bool) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if has_body:
            headers["Content-Type"] = "application/json"
        api_key = self._settings.tonapi.api_key
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        return headers

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        """Perform one throttled request and return the decoded JSON body.

        Args:
            method: HTTP method (GET, POST, DELETE...).
            url: Full URL to request.
            params: Optional query parameters (str/int/float values).
            json: Optional JSON-serializable body.

        Returns:
            Parsed JSON (dict or list), or None for an empty body.

        Raises:
            TonApiError: On status >= 400 (status_code and body set), on
                transport errors/timeouts, or when the body is not valid JSON.
        """
        method = method.upper()
        request_id = uuid.uuid4().hex[:12]

        with bound_contextvars(
            http_method=method,
            http_url=url,
            http_request_id=request_id,
        ):
            await self._throttle.wait()
            try:
                session = await self._get_session()
                async with session.request(
                    method,
                    url,
                    params=params,
                    json=json,
                    headers=self._headers(has_body=json is not None),
                ) as response:
                    if response.status >= 400:
                        body = await response.text()
                        self._logger.warning(
                            "http_request_error_status",
                            http_status_code=response.status,
                            http_body=truncate(body, 200),
                        )
                        raise TonApiError(
                            f"API error {response.status}: {truncate(body, _ERROR_BODY_MAX)}",
                            url=url,
                            method=method,
                            status_code=response.status,
                            body=body,
                        )
                    return await response.json(content_type=None)
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                self._logger.warning(
                    "http_request_failed",
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                raise TonApiError(
                    f"{method} failed: {url}",
                    url=url,
                    method=method,
                    cause=e,
                ) from e
            except ValueError as e:
                self._logger.warning(
                    "http_request_invalid_json",
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                raise TonApiError(
                    f"{method} returned invalid JSON: {url}",
                    url=url,
                    method=method,
                    cause=e,
                ) from e

    async def get(self, url: str, *, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET url and return decoded JSON."""
        return await self.request("GET", url, params=params)

    async def post(self, url: str, *, json: Optional[Any] = None) -> Any:
        """POST a JSON body to url and return decoded JSON."""
        return await self.request("POST", url, json=json)

    async def delete(self, url: str) -> Any:
        """DELETE url and return decoded JSON (usually None)."""
        return await self.request("DELETE", url)
