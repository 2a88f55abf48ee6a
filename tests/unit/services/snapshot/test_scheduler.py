# -*- coding: utf-8 -*-
"""Unit tests for SnapshotScheduler."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock

from supertoken_holders.clients.token_list import TokenInfoSchema
from supertoken_holders.config import NetworkSettings, Settings, SnapshotSettings, TokenListSettings, TokenTarget
from supertoken_holders.exceptions import HolderSnapshotError
from supertoken_holders.models.token_snapshot import SnapshotKey, TokenSnapshot
from supertoken_holders.persistence import SnapshotStore
from supertoken_holders.persistence.repositories.in_memory import InMemorySnapshotBackup
from supertoken_holders.services.snapshot import SnapshotRunResult, SnapshotScheduler
from supertoken_holders.services.tokens import TokenRegistry


def _ok(network: str, token: str) -> SnapshotRunResult:
    return SnapshotRunResult(network=network, chain_id=8453, token_address=token, success=True)


async def test_run_hydrates_then_runs_first_pass_immediately(
    settings: Settings,
    snapshot_factory: Callable[..., TokenSnapshot],
    token_address: str,
) -> None:
    backup = InMemorySnapshotBackup()
    persisted = snapshot_factory([("0x" + "a" * 40, 5)])
    await backup.save(persisted)
    store = SnapshotStore(backup)
    shutdown_event = asyncio.Event()
    hydrated_before_run: list[bool] = []

    async def _run(network: str, token: str) -> SnapshotRunResult:
        hydrated_before_run.append(store.get(SnapshotKey.of(8453, token)) is persisted)
        shutdown_event.set()
        return _ok(network, token)

    pipeline: Any = SimpleNamespace(run=AsyncMock(side_effect=_run))
    scheduler = SnapshotScheduler(pipeline, store, settings)

    await asyncio.wait_for(scheduler.run(shutdown_event), timeout=5)

    pipeline.run.assert_awaited_once_with("base-mainnet", token_address)
    assert hydrated_before_run == [True]


async def test_run_pass_bounds_concurrency(settings: Settings) -> None:
    limited = settings.model_copy(
        update={"snapshot": settings.snapshot.model_copy(update={"max_concurrent_jobs": 2})}
    )
    in_flight = 0
    peak = 0

    async def _run(network: str, token: str) -> SnapshotRunResult:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return _ok(network, token)

    pipeline: Any = SimpleNamespace(run=AsyncMock(side_effect=_run))
    scheduler = SnapshotScheduler(pipeline, SnapshotStore(), limited)
    targets = [TokenTarget(network="base-mainnet", token_address=f"0x{n:040x}") for n in range(5)]

    results = await scheduler.run_pass(targets)

    assert len(results) == 5
    assert peak == 2


async def test_targets_fall_back_to_registry_snapshot_when_refresh_fails(settings: Settings) -> None:
    cached = [TokenTarget(network="base-mainnet", token_address="0x" + "1" * 40)]
    registry: Any = SimpleNamespace(
        refresh=AsyncMock(side_effect=HolderSnapshotError("token list down")),
        targets=lambda: cached,
    )
    scheduler = SnapshotScheduler(SimpleNamespace(), SnapshotStore(), settings, registry)

    assert await scheduler.targets() == cached


async def test_targets_without_registry_come_from_settings(settings: Settings, token_address: str) -> None:
    scheduler = SnapshotScheduler(SimpleNamespace(), SnapshotStore(), settings)

    assert await scheduler.targets() == [TokenTarget(network="base-mainnet", token_address=token_address)]


async def test_targets_keep_list_tokens_and_overrides_when_token_list_goes_down(token_address: str) -> None:
    listed = "0x" + "1" * 40
    manual = "0x" + "6" * 40
    settings = Settings(
        networks=NetworkSettings(networks="base-mainnet:8453"),
        snapshot=SnapshotSettings(tokens=f"base-mainnet:{token_address}"),
        token_list=TokenListSettings(enabled=True, overrides=f"8453:{manual}:MANx"),
    )
    token_list: Any = SimpleNamespace(
        get_tokens=AsyncMock(
            return_value=[TokenInfoSchema(chainId=8453, address=listed, symbol="USDCx", tags=["supertoken"])]
        )
    )
    scheduler = SnapshotScheduler(SimpleNamespace(), SnapshotStore(), settings, TokenRegistry(settings, token_list))
    expected = [
        TokenTarget(network="base-mainnet", token_address=token_address),
        TokenTarget(network="base-mainnet", token_address=listed),
        TokenTarget(network="base-mainnet", token_address=manual),
    ]

    assert await scheduler.targets() == expected

    token_list.get_tokens.side_effect = HolderSnapshotError("token list down")

    assert await scheduler.targets() == expected
