# -*- coding: utf-8 -*-
"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import pytest
from bubus import EventBus  # type: ignore[import-untyped]

from supertoken_holders.config import NetworkSettings, Settings, SnapshotSettings, TokenListSettings
from supertoken_holders.models.ledger_record import LedgerRecord, PoolMembership
from supertoken_holders.models.token_snapshot import HolderRecord, TokenSnapshot
from supertoken_holders.persistence import SnapshotStore
from supertoken_holders.persistence.repositories.in_memory import InMemorySnapshotBackup

TOKEN = "0x46fd5cfb4c12d87acd3a13e92baa53240c661d93"
NETWORK = "base-mainnet"
CHAIN_ID = 8453


def addr(n: int) -> str:
    """Deterministic lowercased 0x address for account number n."""
    return "0x" + f"{n:040x}"


@pytest.fixture
def token_address() -> str:
    """Default Super token address used by tests."""
    return TOKEN


@pytest.fixture
def now_utc() -> datetime:
    """Stable UTC timestamp for deterministic assertions."""
    return datetime(2026, 2, 13, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def settings() -> Settings:
    """Settings with one network and one configured token; no env dependence."""
    return Settings(
        networks=NetworkSettings(
            networks=f"{NETWORK}:{CHAIN_ID},optimism-mainnet:10",
            subgraph_url_template="https://subgraph.test/{network}",
            rpc_url_template="https://rpc.test/{network}",
        ),
        snapshot=SnapshotSettings(tokens=f"{NETWORK}:{TOKEN}"),
        token_list=TokenListSettings(enabled=False),
    )


@pytest.fixture
def record_factory() -> Callable[..., LedgerRecord]:
    """Build LedgerRecord with idle defaults (no flow, no pools) and easy overrides."""

    def _build(n: int, **overrides: Any) -> LedgerRecord:
        account = overrides.pop("account", addr(n))
        return LedgerRecord(
            id=overrides.pop("id", f"{account}-{TOKEN}"),
            account=account,
            ledger_balance=overrides.pop("ledger_balance", 100),
            net_flow_rate=overrides.pop("net_flow_rate", 0),
            last_update_timestamp=overrides.pop("last_update_timestamp", 1_700_000_000),
            last_update_block=overrides.pop("last_update_block", 1_000),
            pool_memberships=tuple(overrides.pop("pool_memberships", ())),
        )

    return _build


@pytest.fixture
def membership() -> Callable[..., PoolMembership]:
    def _build(per_unit_flow_rate: int, units_held: int, connected: bool, pool_id: str = "0xpool") -> PoolMembership:
        return PoolMembership(
            pool_id=pool_id,
            per_unit_flow_rate=per_unit_flow_rate,
            units_held=units_held,
            connected=connected,
        )

    return _build


@pytest.fixture
def snapshot_factory(now_utc: datetime) -> Callable[..., TokenSnapshot]:
    """Build TokenSnapshot from (address, balance) pairs, kept in the given order."""

    def _build(holders: list[tuple[str, int]], **overrides: Any) -> TokenSnapshot:
        return TokenSnapshot(
            chain_id=overrides.pop("chain_id", CHAIN_ID),
            token_address=overrides.pop("token_address", TOKEN),
            block_number=overrides.pop("block_number", 5_000),
            generated_at=overrides.pop("generated_at", now_utc),
            holders=tuple(
                HolderRecord(address=a, balance=b, net_flow_rate=0) for a, b in holders
            ),
        )

    return _build


@pytest.fixture
def snapshot_store() -> SnapshotStore:
    """Fresh store backed by an in-memory backup per test."""
    return SnapshotStore(InMemorySnapshotBackup())


@pytest.fixture
def event_bus() -> EventBus:
    """Isolated event bus instance for tests."""
    return EventBus(
        name="SupertokenHoldersTests",
        max_history_size=200,
        wal_path=None,
    )
