"""Swap and transfer extraction from TonAPI event actions."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Literal

from ton_tracker.models.event import Event
from ton_tracker.utils.units import jetton_units_to_amount, nano_to_ton

SwapSide = Literal["buy", "sell", "swap"]
TransferDirection = Literal["in", "out"]


@dataclass(frozen=True, slots=True)
class Swap:
    """A DEX swap seen from the TON side (buy = TON in, sell = TON out)."""

    dex: str
    side: SwapSide
    from_symbol: str = ""
    from_amount: float = 0.0
    to_symbol: str = ""
    to_amount: float = 0.0
    ton_amount: float = 0.0
    jetton_symbol: str = ""
    jetton_amount: float = 0.0
    jetton_master: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class Transfer:
    """A TON transfer into or out of the watched address."""

    direction: TransferDirection
    amount: float
    sender: str
    recipient: str
    comment: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def extract_swaps(event: Event) -> list[Swap]:
    """Return the JettonSwap actions of event as Swap items, in action order."""
    swaps: list[Swap] = []
    for action in event.actions:
        js = action.jetton_swap
        if action.type != "JettonSwap" or js is None:
            continue
        if js.ton_in > 0:
            ton = nano_to_ton(js.ton_in)
            master = js.jetton_master_out
            amount = jetton_units_to_amount(js.amount_out, master.decimals) if master else 0.0
            swaps.append(
                Swap(
                    dex=js.dex,
                    side="buy",
                    from_symbol="TON",
                    from_amount=ton,
                    to_symbol=master.symbol if master else "",
                    to_amount=amount,
                    ton_amount=ton,
                    jetton_symbol=master.symbol if master else "",
                    jetton_amount=amount,
                    jetton_master=master.address if master else "",
                )
            )
        elif js.ton_out > 0:
            ton = nano_to_ton(js.ton_out)
            master = js.jetton_master_in
            amount = jetton_units_to_amount(js.amount_in, master.decimals) if master else 0.0
            swaps.append(
                Swap(
                    dex=js.dex,
                    side="sell",
                    from_symbol=master.symbol if master else "",
                    from_amount=amount,
                    to_symbol="TON",
                    to_amount=ton,
                    ton_amount=ton,
                    jetton_symbol=master.symbol if master else "",
                    jetton_amount=amount,
                    jetton_master=master.address if master else "",
                )
            )
        else:
            # jetton -> jetton: no TON leg, amount filters see 0
            swaps.append(Swap(dex=js.dex, side="swap"))
    return swaps


def extract_transfers(event: Event, watched_raw: str) -> list[Transfer]:
    """Return TonTransfer actions touching watched_raw; others are skipped."""
    transfers: list[Transfer] = []
    for action in event.actions:
        tt = action.ton_transfer
        if action.type != "TonTransfer" or tt is None:
            continue
        direction: TransferDirection
        if tt.recipient.address == watched_raw:
            direction = "in"
        elif tt.sender.address == watched_raw:
            direction = "out"
        else:
            continue
        transfers.append(
            Transfer(
                direction=direction,
                amount=nano_to_ton(tt.amount),
                sender=tt.sender.address,
                recipient=tt.recipient.address,
                comment=tt.comment,
            )
        )
    return transfers
