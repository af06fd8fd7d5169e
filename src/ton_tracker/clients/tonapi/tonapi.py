# -*- coding: utf-8 -*-
"""TonAPI v2 client: accounts, events and webhook subscriptions."""

from __future__ import annotations

import structlog
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Sequence, cast
from structlog.contextvars import bound_contextvars

from ton_tracker.config import Settings
from ton_tracker.exceptions import TonApiError
from ton_tracker.models.event import AccountInfo, Event
from ton_tracker.models.webhook import WebhookRegistration
from ton_tracker.utils.validation import mask_address, truncate

if TYPE_CHECKING:
    from ton_tracker.clients.http import AsyncHttpClient


class TonApiClient:
    """Client for TonAPI (/accounts, /events, /webhooks).

    All calls share the HTTP client's throttle. Cancelling the awaiting task
    aborts the call (throttle wait or in-flight request).
    """

    def __init__(
        self,
        http_client: "AsyncHttpClient",
        settings: Settings,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            http_client: Async HTTP client (throttled).
            settings: Application settings (uses settings.tonapi.base_url).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._http = http_client
        self._settings = settings
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def _url(self, path: str) -> str:
        return f"{self._settings.tonapi.base_url.rstrip('/')}{path}"

    @staticmethod
    def _expect_dict(data: Any, url: str) -> Dict[str, Any]:
        if not isinstance(data, dict):
            raise TonApiError(
                f"Unexpected response type {type(data).__name__}: {url}",
                url=url,
            )
        return cast(Dict[str, Any], data)

    # ------------------------------------------------------------------
    # Accounts and events
    # ------------------------------------------------------------------

    async def get_account_info(self, address: str) -> AccountInfo:
        """Resolve any address form to canonical account info (raw address).

        API: GET /accounts/{address}
        """
        with bound_contextvars(tonapi_address_masked=mask_address(address)):
            url = self._url(f"/accounts/{address}")
            data = self._expect_dict(await self._http.get(url), url)
            return AccountInfo.from_response(data)

    async def get_events(self, address: str, *, limit: int = 5) -> List[Event]:
        """Fetch the most recent events of an account (most recent first).

        API: GET /accounts/{address}/events?limit=N
        """
        with bound_contextvars(
            tonapi_address_masked=mask_address(address),
            tonapi_limit=limit,
        ):
            url = self._url(f"/accounts/{address}/events")
            data = self._expect_dict(await self._http.get(url, params={"limit": limit}), url)
            raw_events = data.get("events")
            if not isinstance(raw_events, list):
                self._logger.warning(
                    "tonapi_get_events_non_list",
                    tonapi_response_type=type(raw_events).__name__,
                )
                return []
            return [
                Event.from_response(cast(Dict[str, Any], e))
                for e in cast(List[Any], raw_events)
                if isinstance(e, dict)
            ]

    async def get_event_by_hash(self, tx_hash: str) -> Event:
        """Fetch a single event by transaction hash (or event id).

        API: GET /events/{tx_hash}
        """
        with bound_contextvars(tonapi_tx_hash=truncate(tx_hash, 10)):
            url = self._url(f"/events/{tx_hash}")
            data = self._expect_dict(await self._http.get(url), url)
            return Event.from_response(data)

    # ------------------------------------------------------------------
    # Webhooks
    # ------------------------------------------------------------------

    async def list_webhooks(self) -> List[WebhookRegistration]:
        """List webhooks registered for this API key.

        API: GET /webhooks
        """
        url = self._url("/webhooks")
        data = self._expect_dict(await self._http.get(url), url)
        raw = data.get("webhooks")
        if not isinstance(raw, list):
            return []
        return [
            WebhookRegistration.from_response(cast(Dict[str, Any], w))
            for w in cast(List[Any], raw)
            if isinstance(w, dict)
        ]

    async def create_webhook(self, endpoint: str) -> WebhookRegistration:
        """Register a new webhook pointing at endpoint.

        API: POST /webhooks {"endpoint": ...}
        """
        url = self._url("/webhooks")
        data = self._expect_dict(await self._http.post(url, json={"endpoint": endpoint}), url)
        registration = WebhookRegistration.from_response(data)
        # Some API versions return only the id.
        if not registration.endpoint:
            registration = WebhookRegistration(id=registration.id, endpoint=endpoint)
        return registration

    async def delete_webhook(self, webhook_id: int) -> None:
        """Delete a webhook.

        API: DELETE /webhooks/{id}
        """
        await self._http.delete(self._url(f"/webhooks/{webhook_id}"))

    async def subscribe_accounts(self, webhook_id: int, accounts: Sequence[str]) -> None:
        """Subscribe accounts to account-tx notifications of a webhook.

        API: POST /webhooks/{id}/account-tx/subscribe {"accounts": [...]}
        """
        with bound_contextvars(tonapi_webhook_id=webhook_id, tonapi_accounts_count=len(accounts)):
            await self._http.post(
                self._url(f"/webhooks/{webhook_id}/account-tx/subscribe"),
                json={"accounts": list(accounts)},
            )

    async def unsubscribe_accounts(self, webhook_id: int, accounts: Sequence[str]) -> None:
        """Unsubscribe accounts from a webhook.

        API: POST /webhooks/{id}/account-tx/unsubscribe {"accounts": [...]}
        """
        with bound_contextvars(tonapi_webhook_id=webhook_id, tonapi_accounts_count=len(accounts)):
            await self._http.post(
                self._url(f"/webhooks/{webhook_id}/account-tx/unsubscribe"),
                json={"accounts": list(accounts)},
            )
