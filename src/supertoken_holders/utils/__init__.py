# -*- coding: utf-8 -*-
"""Utility modules."""

from supertoken_holders.utils.validation import (
    is_hex_address,
    mask_address,
    normalize_address,
    parse_int_amount,
)

__all__ = ["is_hex_address", "mask_address", "normalize_address", "parse_int_amount"]
