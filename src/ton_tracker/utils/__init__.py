# -*- coding: utf-8 -*-
"""Utility modules."""

from ton_tracker.utils.units import jetton_units_to_amount, nano_to_ton, short_addr
from ton_tracker.utils.validation import is_raw_address, mask_address, truncate

__all__ = [
    "is_raw_address",
    "jetton_units_to_amount",
    "mask_address",
    "nano_to_ton",
    "short_addr",
    "truncate",
]
