# -*- coding: utf-8 -*-
"""Event notification styler (Telegram HTML)."""

from __future__ import annotations

import html
from typing import Any, cast

from ton_tracker.notifications.types import NotificationMessage, NotificationStyler
from ton_tracker.utils.units import short_addr

EXPLORER_URL = "https://tonviewer.com"

_DEX_NAMES: dict[str, str] = {
    "stonfi": "STON.fi",
    "ston.fi": "STON.fi",
    "dedust": "DeDust",
    "megaton": "Megaton",
    "megatonfi": "Megaton",
}


class EventNotificationStyler(NotificationStyler):
    """Render swap/transfer notifications by event_type."""

    def render(self, message: NotificationMessage) -> str:
        """Dispatch to the appropriate renderer based on event_type."""
        payload: dict[str, Any] = dict(message.payload or {})
        if message.event_type == "swap":
            return self._render_swap(payload)
        if message.event_type == "transfer":
            return self._render_transfer(payload)
        return self._render_generic(message.event_type, payload)

    def _render_swap(self, payload: dict[str, Any]) -> str:
        wallet = self._dict(payload.get("wallet"))
        swap = self._dict(payload.get("swap"))
        side = swap.get("side")
        emoji, side_word = {
            "buy": ("✅", "BUY"),
            "sell": ("🔻", "SELL"),
        }.get(str(side), ("🔁", "SWAP"))

        name_link = self._link(wallet.get("address_display") or "", wallet.get("name") or "wallet")
        if side == "buy":
            pair_line = (
                f"{self._ton(swap.get('from_amount'))} TON 🔄 "
                f"{self.format_number(swap.get('to_amount'))} {html.escape(str(swap.get('to_symbol') or ''))}"
            )
        elif side == "sell":
            pair_line = (
                f"{self.format_number(swap.get('from_amount'))} {html.escape(str(swap.get('from_symbol') or ''))} "
                f"🔄 {self._ton(swap.get('to_amount'))} TON"
            )
        else:
            pair_line = ""

        lines = [
            f"{emoji} <b>{side_word} by {name_link}</b>",
            f"<i>via {self.format_dex(str(swap.get('dex') or ''))}</i>",
        ]
        if pair_line:
            lines.extend(["", pair_line])
        jetton_master = swap.get("jetton_master")
        if jetton_master:
            lines.extend(["", f"<code>{html.escape(str(jetton_master))}</code>"])
        return "\n".join(lines)

    def _render_transfer(self, payload: dict[str, Any]) -> str:
        wallet = self._dict(payload.get("wallet"))
        transfer = self._dict(payload.get("transfer"))
        incoming = transfer.get("direction") == "in"
        emoji, sign = ("🟩", "+") if incoming else ("🟥", "-")
        wallet_raw = wallet.get("address_raw")
        wallet_name = wallet.get("name") or short_addr(wallet.get("address_display"))

        def party(addr: str | None) -> str:
            label = wallet_name if addr and addr == wallet_raw else short_addr(addr)
            return self._link(addr or "", label)

        lines = [
            "<b>🔔 Transfer detected</b>",
            "",
            f"{sign}{self._ton(transfer.get('amount'))} TON {emoji}",
            "",
            f"{party(transfer.get('sender'))} → {party(transfer.get('recipient'))}",
        ]
        comment = transfer.get("comment")
        if comment:
            lines.extend(["", f"💬 Comment: <code>{html.escape(str(comment))}</code>"])
        return "\n".join(lines)

    @staticmethod
    def _render_generic(event_type: str, payload: dict[str, Any]) -> str:
        lines = [f"ℹ️ <b>{event_type.replace('_', ' ').title()}</b>"]
        for key in sorted(payload.keys()):
            value = payload.get(key)
            if value is not None:
                lines.append(f"<b>{key}:</b> {html.escape(str(value))}")
        return "\n".join(lines)

    @staticmethod
    def _dict(value: Any) -> dict[str, Any]:
        return cast(dict[str, Any], value) if isinstance(value, dict) else {}

    @staticmethod
    def _link(address: str, label: str) -> str:
        return f"<a href='{EXPLORER_URL}/{html.escape(address)}'>{html.escape(label)}</a>"

    @staticmethod
    def _ton(value: Any) -> str:
        try:
            return f"{float(value):.2f}"
        except (TypeError, ValueError):
            return "0.00"

    @staticmethod
    def format_dex(dex: str) -> str:
        """Human DEX name (STON.fi, DeDust, Megaton); unknown names title-cased."""
        if not dex:
            return "DEX"
        return _DEX_NAMES.get(dex.lower(), dex.title())

    @staticmethod
    def format_number(value: Any) -> str:
        """Compact number: 1.50K, 2.00M, 3.10B; below 1000 two decimals."""
        try:
            num = float(value)
        except (TypeError, ValueError):
            return "0.00"
        magnitude = abs(num)
        if magnitude >= 1_000_000_000:
            return f"{num / 1_000_000_000:.2f}B"
        if magnitude >= 1_000_000:
            return f"{num / 1_000_000:.2f}M"
        if magnitude >= 1_000:
            return f"{num / 1_000:.2f}K"
        return f"{num:.2f}"
