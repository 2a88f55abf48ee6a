"""Ledger records: last-known balance and accrual parameters per (account, token).

A record is what the external ledger (protocol subgraph) knows about one account's
holding of one Super token at the time of its last update. Between updates the
balance keeps moving: continuously via the account's net flow rate, and via its
memberships in distribution pools.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PoolMembership:
    """An account's units in a distribution pool.

    - connected: accrual lands in the spendable balance immediately.
    - disconnected: accrual is claimable, not yet part of the balance.
    """

    pool_id: str
    per_unit_flow_rate: int
    """Units per second streamed per pool unit held."""

    units_held: int
    connected: bool

    @property
    def flow_rate(self) -> int:
        """Total per-second accrual of this membership."""
        if self.per_unit_flow_rate == 0 or self.units_held == 0:
            return 0
        return self.per_unit_flow_rate * self.units_held


@dataclass(frozen=True, slots=True)
class LedgerRecord:
    """Per (account, token): ledger balance at last update plus accrual parameters."""

    id: str
    """Ledger record id (pagination cursor)."""

    account: str
    """Lowercased 0x account address."""

    ledger_balance: int
    net_flow_rate: int
    """Signed units per second."""

    last_update_timestamp: int
    last_update_block: int
    pool_memberships: tuple[PoolMembership, ...] = ()

    @property
    def has_pool_memberships(self) -> bool:
        return len(self.pool_memberships) > 0
