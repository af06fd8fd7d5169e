"""Webhook registration and inbound payload DTOs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, cast

from ton_tracker.models.event import Event, _as_int

# Payload categories that never carry an actionable account transaction.
IGNORED_EVENT_TYPES: frozenset[str] = frozenset({"mempool_msg", "new_contract"})


@dataclass(frozen=True, slots=True)
class WebhookRegistration:
    """Webhook held by TonAPI: id plus target endpoint."""

    id: int
    endpoint: str
    subscribed_accounts: tuple[str, ...] = ()

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> WebhookRegistration:
        accounts = response.get("subscribed_accounts")
        return cls(
            id=_as_int(response.get("webhook_id")),
            endpoint=str(response.get("endpoint") or ""),
            subscribed_accounts=tuple(str(a) for a in cast(list[Any], accounts))
            if isinstance(accounts, list)
            else (),
        )


@dataclass(frozen=True, slots=True)
class WebhookPayload:
    """Inbound push from TonAPI (account-tx subscription)."""

    event_type: str = ""
    account_id: str = ""
    tx_hash: str = ""
    lt: int = 0
    event: Event | None = None

    @property
    def is_ignored(self) -> bool:
        """True for non-actionable categories (mempool, new contract)."""
        return self.event_type in IGNORED_EVENT_TYPES

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> WebhookPayload:
        """Build from the decoded JSON object. Missing fields default to empty."""
        raw_event = response.get("event")
        lt_raw = response.get("lt")
        try:
            lt = int(lt_raw) if lt_raw is not None else 0
        except (TypeError, ValueError):
            lt = 0
        return cls(
            event_type=str(response.get("event_type") or ""),
            account_id=str(response.get("account_id") or "").strip(),
            tx_hash=str(response.get("tx_hash") or "").strip(),
            lt=lt,
            event=Event.from_response(cast(dict[str, Any], raw_event))
            if isinstance(raw_event, dict)
            else None,
        )
