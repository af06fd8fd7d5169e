"""Amount conversions for TON and jettons."""

from __future__ import annotations

NANO_PER_TON = 1_000_000_000


def nano_to_ton(nano: int | None) -> float:
    """Convert nanoTON to TON."""
    if not nano:
        return 0.0
    return nano / NANO_PER_TON


def jetton_units_to_amount(units: str | int | None, decimals: int) -> float:
    """Convert raw jetton units (decimal string) to a human amount. Invalid input -> 0."""
    if units is None or units == "":
        return 0.0
    try:
        value = int(units)
    except (TypeError, ValueError):
        return 0.0
    return value / (10 ** max(0, decimals))


def short_addr(addr: str | None, n: int = 4) -> str:
    """Shorten an address for display, e.g. EQAb...xyz1."""
    if not addr:
        return "unknown"
    if len(addr) < n * 2 + 3:
        return addr
    return f"{addr[:n]}...{addr[-n:]}"
