"""Balance projection from a ledger record to a reference timestamp.

balance   = ledger_balance + net_flow_rate * dt + sum(connected pool accrual)
claimable = sum(disconnected pool accrual)
pool accrual = per_unit_flow_rate * units_held * dt

All arithmetic is on Python ints. A negative dt (reference earlier than the
ledger update) is clamped to 0.
"""

from __future__ import annotations

from dataclasses import dataclass

from supertoken_holders.models.ledger_record import LedgerRecord


@dataclass(frozen=True, slots=True)
class ProjectedBalance:
    """Result of projecting a ledger record forward."""

    balance: int
    claimable_balance: int
    delta_t: int
    """Seconds of accrual applied (after clamping)."""

    clamped: bool = False
    """True when the raw dt was negative and clamped to 0."""


def project(record: LedgerRecord, reference_timestamp: int) -> ProjectedBalance:
    """Project record's balance and claimable balance to reference_timestamp."""
    raw_dt = int(reference_timestamp) - record.last_update_timestamp
    clamped = raw_dt < 0
    delta_t = 0 if clamped else raw_dt

    balance = record.ledger_balance
    claimable = 0
    if delta_t == 0:
        return ProjectedBalance(balance=balance, claimable_balance=0, delta_t=0, clamped=clamped)

    if record.net_flow_rate != 0:
        balance += record.net_flow_rate * delta_t

    for membership in record.pool_memberships:
        flow_rate = membership.flow_rate
        if flow_rate == 0:
            continue
        accrual = flow_rate * delta_t
        if membership.connected:
            balance += accrual
        else:
            claimable += accrual

    return ProjectedBalance(
        balance=balance,
        claimable_balance=claimable,
        delta_t=delta_t,
        clamped=clamped,
    )


def effective_net_flow_rate(record: LedgerRecord) -> int:
    """Net flow rate including connected pool inflow (the rate reported per holder)."""
    rate = record.net_flow_rate
    for membership in record.pool_memberships:
        if membership.connected:
            rate += membership.flow_rate
    return rate
