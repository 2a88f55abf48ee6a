# -*- coding: utf-8 -*-
"""Unit tests for balance projection."""

from __future__ import annotations

from collections.abc import Callable

from supertoken_holders.models.ledger_record import LedgerRecord, PoolMembership
from supertoken_holders.services.projection import effective_net_flow_rate, project


def test_project_applies_net_flow_over_elapsed_seconds(
    record_factory: Callable[..., LedgerRecord],
) -> None:
    record = record_factory(
        1,
        ledger_balance=10**18,
        net_flow_rate=10**8,
        last_update_timestamp=1_700_000_000,
    )

    projected = project(record, 1_700_003_600)

    assert projected.balance == 1000000360000000000
    assert projected.claimable_balance == 0
    assert projected.delta_t == 3600
    assert projected.clamped is False


def test_project_is_deterministic(record_factory: Callable[..., LedgerRecord]) -> None:
    record = record_factory(1, ledger_balance=5, net_flow_rate=-1, last_update_timestamp=100)

    assert project(record, 103) == project(record, 103)


def test_project_negative_flow_reduces_balance(record_factory: Callable[..., LedgerRecord]) -> None:
    record = record_factory(1, ledger_balance=1_000, net_flow_rate=-3, last_update_timestamp=100)

    assert project(record, 110).balance == 970


def test_project_splits_connected_and_disconnected_pool_accrual(
    record_factory: Callable[..., LedgerRecord],
    membership: Callable[..., PoolMembership],
) -> None:
    record = record_factory(
        1,
        ledger_balance=1_000,
        net_flow_rate=2,
        last_update_timestamp=100,
        pool_memberships=[
            membership(per_unit_flow_rate=3, units_held=10, connected=True, pool_id="0xa"),
            membership(per_unit_flow_rate=5, units_held=4, connected=False, pool_id="0xb"),
        ],
    )

    projected = project(record, 110)

    # 1000 + 2*10 + 3*10*10
    assert projected.balance == 1_320
    # 5*4*10
    assert projected.claimable_balance == 200


def test_project_clamps_negative_delta_t(record_factory: Callable[..., LedgerRecord]) -> None:
    record = record_factory(1, ledger_balance=500, net_flow_rate=7, last_update_timestamp=2_000)

    projected = project(record, 1_000)

    assert projected.balance == 500
    assert projected.delta_t == 0
    assert projected.clamped is True


def test_project_zero_flow_rates_leave_balance_unchanged(
    record_factory: Callable[..., LedgerRecord],
    membership: Callable[..., PoolMembership],
) -> None:
    record = record_factory(
        1,
        ledger_balance=42,
        last_update_timestamp=0,
        pool_memberships=[membership(per_unit_flow_rate=0, units_held=100, connected=True)],
    )

    projected = project(record, 10**9)

    assert projected.balance == 42
    assert projected.claimable_balance == 0


def test_project_keeps_integer_precision_beyond_float_range(
    record_factory: Callable[..., LedgerRecord],
) -> None:
    record = record_factory(
        1,
        ledger_balance=2**70 + 1,
        net_flow_rate=2**40 + 3,
        last_update_timestamp=0,
    )

    assert project(record, 1).balance == 2**70 + 2**40 + 4


def test_effective_net_flow_rate_includes_connected_pools_only(
    record_factory: Callable[..., LedgerRecord],
    membership: Callable[..., PoolMembership],
) -> None:
    record = record_factory(
        1,
        net_flow_rate=-10,
        pool_memberships=[
            membership(per_unit_flow_rate=2, units_held=6, connected=True),
            membership(per_unit_flow_rate=100, units_held=1, connected=False),
        ],
    )

    assert effective_net_flow_rate(record) == 2
