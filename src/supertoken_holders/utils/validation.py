"""Validation helpers for addresses and integer amounts."""

from __future__ import annotations

from typing import Any


def is_hex_address(addr: Any) -> bool:
    """Return True if addr is a valid 0x address (42 chars)."""
    if not isinstance(addr, str):
        return False
    s = addr.strip()
    if len(s) != 42:
        return False
    if not s.startswith("0x"):
        return False
    try:
        int(s[2:], 16)
        return True
    except ValueError:
        return False


def normalize_address(addr: str) -> str:
    """Return the address stripped and lowercased (0x-prefixed)."""
    s = (addr or "").strip().lower()
    if s and not s.startswith("0x"):
        s = "0x" + s
    return s


def parse_int_amount(raw: Any, *, field: str = "amount") -> int:
    """Parse an integer amount given as int or decimal string.

    Rejects floats, booleans and fractional strings so monetary values never
    pass through floating point.

    Raises:
        ValueError: If raw is not an integer or a base-10 integer string.
    """
    if isinstance(raw, bool):
        raise ValueError(f"{field} must be an integer, got bool")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        s = raw.strip()
        body = s[1:] if s[:1] in ("-", "+") else s
        if body.isdigit():
            return int(s)
    raise ValueError(f"{field} must be an integer string, got {raw!r}")


def mask_address(addr: str | None) -> str:
    """Return a masked address for logging (e.g. 0x1234...abcd)."""
    if not addr or len(addr) < 10:
        return "***"
    return f"{addr[:6]}...{addr[-4:]}"
