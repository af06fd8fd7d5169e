"""Validation and masking helpers for TON addresses and hashes."""

from __future__ import annotations

import re
from typing import Any

_RAW_ADDRESS_RE = re.compile(r"^-?\d+:[0-9a-fA-F]{64}$")


def is_raw_address(addr: Any) -> bool:
    """Return True if addr is a raw TON address (workchain:64 hex chars, e.g. 0:ab..)."""
    if not isinstance(addr, str):
        return False
    return bool(_RAW_ADDRESS_RE.match(addr.strip()))


def mask_address(addr: str | None) -> str:
    """Return a masked address for logging (e.g. 0:1234...abcd)."""
    if not addr or len(addr) < 10:
        return "***"
    return f"{addr[:6]}...{addr[-4:]}"


def truncate(value: str | None, n: int) -> str:
    """Return value cut to n characters with a trailing ellipsis when longer."""
    if not value:
        return ""
    if len(value) <= n:
        return value
    return value[:n] + "..."
