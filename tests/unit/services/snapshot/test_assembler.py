# -*- coding: utf-8 -*-
"""Unit tests for SnapshotAssembler."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from supertoken_holders.models.ledger_record import LedgerRecord, PoolMembership
from supertoken_holders.services.reconciliation import ReconciliationPlanner
from supertoken_holders.services.snapshot import SnapshotAssembler


def _assemble(
    records: list[LedgerRecord],
    verified: dict[str, int],
    now_utc: datetime,
    token_address: str,
    *,
    head: int = 10_000,
    reference_timestamp: int = 1_700_000_000,
):
    plan = ReconciliationPlanner().plan(records, head, reference_timestamp)
    return SnapshotAssembler().assemble(
        chain_id=8453,
        token_address=token_address.upper().replace("0X", "0x"),
        records=records,
        plan=plan,
        verified_balances=verified,
        block_number=head + 1,
        generated_at=now_utc,
    )


def test_holders_sorted_by_balance_desc_then_address_asc(
    record_factory: Callable[..., LedgerRecord],
    now_utc: datetime,
    token_address: str,
) -> None:
    records = [
        record_factory(3, ledger_balance=50),
        record_factory(1, ledger_balance=50),
        record_factory(2, ledger_balance=70),
    ]

    result = _assemble(records, {}, now_utc, token_address)

    assert [(h.address, h.balance) for h in result.snapshot.holders] == [
        (records[2].account, 70),
        (records[1].account, 50),
        (records[0].account, 50),
    ]
    assert result.snapshot.token_address == token_address
    assert result.snapshot.block_number == 10_001


def test_zero_balances_are_excluded(
    record_factory: Callable[..., LedgerRecord],
    now_utc: datetime,
    token_address: str,
) -> None:
    idle_zero = record_factory(1, ledger_balance=0)
    flowing = record_factory(2, net_flow_rate=-1)

    result = _assemble([idle_zero, flowing], {flowing.account: 0}, now_utc, token_address)

    assert result.snapshot.holders == ()
    assert result.zero_balance_count == 2


def test_verified_balance_wins_over_projection(
    record_factory: Callable[..., LedgerRecord],
    now_utc: datetime,
    token_address: str,
) -> None:
    flowing = record_factory(1, ledger_balance=1, net_flow_rate=5)

    result = _assemble([flowing], {flowing.account: 999}, now_utc, token_address)

    assert result.snapshot.holders[0].balance == 999
    assert result.snapshot.holders[0].net_flow_rate == 5


def test_unverified_untrusted_account_is_left_out(
    record_factory: Callable[..., LedgerRecord],
    now_utc: datetime,
    token_address: str,
) -> None:
    trusted = record_factory(1, ledger_balance=10)
    failed = record_factory(2, ledger_balance=10, net_flow_rate=1)

    result = _assemble([trusted, failed], {}, now_utc, token_address)

    assert [h.address for h in result.snapshot.holders] == [trusted.account]
    assert result.unresolved_accounts == (failed.account,)


def test_duplicate_records_yield_one_holder(
    record_factory: Callable[..., LedgerRecord],
    now_utc: datetime,
    token_address: str,
) -> None:
    records = [record_factory(1, ledger_balance=10), record_factory(1, ledger_balance=20)]

    result = _assemble(records, {}, now_utc, token_address)

    assert len(result.snapshot.holders) == 1
    assert result.snapshot.holders[0].balance == 10


def test_claimable_balance_attached_only_when_positive(
    record_factory: Callable[..., LedgerRecord],
    membership: Callable[..., PoolMembership],
    now_utc: datetime,
    token_address: str,
) -> None:
    with_pool = record_factory(
        1,
        last_update_timestamp=1_699_999_990,
        pool_memberships=[membership(per_unit_flow_rate=2, units_held=3, connected=False)],
    )
    plain = record_factory(2, ledger_balance=5)

    result = _assemble([with_pool, plain], {with_pool.account: 100}, now_utc, token_address)

    by_address = {h.address: h for h in result.snapshot.holders}
    assert by_address[with_pool.account].claimable_balance == 60
    assert by_address[plain.account].claimable_balance is None
