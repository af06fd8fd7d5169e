"""Event DTOs built from TonAPI responses.

Events are transient: consumed once per delivery and never persisted beyond
the ProcessedEvent entry they produce.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, cast

ActionType = Literal["TonTransfer", "JettonSwap"]


def _as_dict(value: Any) -> dict[str, Any] | None:
    return cast(dict[str, Any], value) if isinstance(value, dict) else None


def _as_int(value: Any, default: int = 0) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True, slots=True)
class AccountRef:
    """Account reference inside an action (sender, recipient, router)."""

    address: str = ""
    name: str | None = None
    is_scam: bool = False
    is_wallet: bool = False

    @classmethod
    def from_response(cls, response: dict[str, Any] | None) -> AccountRef:
        if not response:
            return cls()
        return cls(
            address=str(response.get("address") or ""),
            name=response.get("name"),
            is_scam=bool(response.get("is_scam", False)),
            is_wallet=bool(response.get("is_wallet", False)),
        )


@dataclass(frozen=True, slots=True)
class JettonInfo:
    """Jetton master metadata."""

    address: str = ""
    name: str = ""
    symbol: str = ""
    decimals: int = 9
    image: str | None = None

    @classmethod
    def from_response(cls, response: dict[str, Any] | None) -> JettonInfo | None:
        if not response:
            return None
        return cls(
            address=str(response.get("address") or ""),
            name=str(response.get("name") or ""),
            symbol=str(response.get("symbol") or ""),
            decimals=_as_int(response.get("decimals"), 9),
            image=response.get("image"),
        )


@dataclass(frozen=True, slots=True)
class TonTransfer:
    """Native TON transfer; amount in nanoTON."""

    sender: AccountRef
    recipient: AccountRef
    amount: int = 0
    comment: str | None = None

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> TonTransfer:
        return cls(
            sender=AccountRef.from_response(_as_dict(response.get("sender"))),
            recipient=AccountRef.from_response(_as_dict(response.get("recipient"))),
            amount=_as_int(response.get("amount")),
            comment=response.get("comment") or None,
        )


@dataclass(frozen=True, slots=True)
class JettonSwap:
    """DEX swap; ton_in/ton_out in nanoTON, amount_in/amount_out in jetton units."""

    dex: str = ""
    ton_in: int = 0
    ton_out: int = 0
    amount_in: str = ""
    amount_out: str = ""
    jetton_master_in: JettonInfo | None = None
    jetton_master_out: JettonInfo | None = None
    router: AccountRef = field(default_factory=AccountRef)

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> JettonSwap:
        return cls(
            dex=str(response.get("dex") or ""),
            ton_in=_as_int(response.get("ton_in")),
            ton_out=_as_int(response.get("ton_out")),
            amount_in=str(response.get("amount_in") or ""),
            amount_out=str(response.get("amount_out") or ""),
            jetton_master_in=JettonInfo.from_response(_as_dict(response.get("jetton_master_in"))),
            jetton_master_out=JettonInfo.from_response(_as_dict(response.get("jetton_master_out"))),
            router=AccountRef.from_response(_as_dict(response.get("router"))),
        )


@dataclass(frozen=True, slots=True)
class Action:
    """One typed action of an event. Unknown types keep only type/status."""

    type: str
    status: str = ""
    ton_transfer: TonTransfer | None = None
    jetton_swap: JettonSwap | None = None

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> Action:
        transfer = _as_dict(response.get("TonTransfer"))
        swap = _as_dict(response.get("JettonSwap"))
        return cls(
            type=str(response.get("type") or ""),
            status=str(response.get("status") or ""),
            ton_transfer=TonTransfer.from_response(transfer) if transfer is not None else None,
            jetton_swap=JettonSwap.from_response(swap) if swap is not None else None,
        )


@dataclass(frozen=True, slots=True)
class Event:
    """TonAPI event: id, timestamp and ordered actions."""

    event_id: str
    timestamp: int = 0
    actions: tuple[Action, ...] = ()
    is_scam: bool = False

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> Event:
        raw_actions = response.get("actions")
        actions: list[Action] = []
        if isinstance(raw_actions, list):
            for item in cast(list[Any], raw_actions):
                action = _as_dict(item)
                if action is not None:
                    actions.append(Action.from_response(action))
        return cls(
            event_id=str(response.get("event_id") or ""),
            timestamp=_as_int(response.get("timestamp")),
            actions=tuple(actions),
            is_scam=bool(response.get("is_scam", False)),
        )


@dataclass(frozen=True, slots=True)
class AccountInfo:
    """Canonical account info; address is raw (0:...)."""

    address: str
    balance: int = 0
    status: str = ""

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> AccountInfo:
        return cls(
            address=str(response.get("address") or ""),
            balance=_as_int(response.get("balance")),
            status=str(response.get("status") or ""),
        )
