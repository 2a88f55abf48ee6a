# -*- coding: utf-8 -*-
"""Unit tests for HolderQueryService."""

from __future__ import annotations

from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import pytest

from supertoken_holders.exceptions import InvalidQueryError
from supertoken_holders.models.token_snapshot import TokenSnapshot
from supertoken_holders.persistence import SnapshotStore
from supertoken_holders.services.holders import HolderQueryService
from supertoken_holders.services.tokens import RegisteredToken

A = "0x" + "a" * 40
B = "0x" + "b" * 40


def _registry(token_address: str) -> Any:
    token = RegisteredToken(chain_id=8453, network="base-mainnet", address=token_address, symbol="USDCx")

    def _resolve(chain_id: int, value: str) -> RegisteredToken:
        if chain_id == 8453 and value in (token_address, "USDCx"):
            return token
        raise InvalidQueryError(f"unknown token {value}")

    return SimpleNamespace(
        resolve=_resolve,
        supported_chain_ids=lambda: [8453],
        all_tokens=lambda: [token],
        tokens_for_chain=lambda chain_id: [token] if chain_id == 8453 else [],
    )


async def test_list_holders_filters_by_min_balance(
    snapshot_store: SnapshotStore,
    snapshot_factory: Callable[..., TokenSnapshot],
    token_address: str,
) -> None:
    await snapshot_store.publish(snapshot_factory([(A, 100), (B, 50)]))
    service = HolderQueryService(snapshot_store)

    page = service.list_holders(8453, token_address, min_balance_wei="60")

    assert page.to_dict()["holders"] == [{"address": A, "balance": "100", "netFlowRate": "0"}]
    assert page.to_dict()["total"] == 1
    assert page.to_dict()["tokenSymbol"] == ""


async def test_list_holders_resolves_symbol_through_registry(
    snapshot_store: SnapshotStore,
    snapshot_factory: Callable[..., TokenSnapshot],
    token_address: str,
) -> None:
    await snapshot_store.publish(snapshot_factory([(A, 1), (B, 2)]))
    service = HolderQueryService(snapshot_store, _registry(token_address))

    page = service.list_holders(8453, "USDCx")

    assert [h.address for h in page.holders] == [A, B]
    assert page.token_address == token_address
    assert page.to_dict()["tokenSymbol"] == "USDCx"


def test_list_holders_unknown_token_raises(snapshot_store: SnapshotStore, token_address: str) -> None:
    service = HolderQueryService(snapshot_store, _registry(token_address))

    with pytest.raises(InvalidQueryError):
        service.list_holders(8453, "NOPEx")


def test_list_tokens_and_chains(snapshot_store: SnapshotStore, token_address: str) -> None:
    service = HolderQueryService(snapshot_store, _registry(token_address))

    assert service.supported_chain_ids() == [8453]
    assert [t.symbol for t in service.list_tokens()] == ["USDCx"]
    assert service.list_tokens(10) == []
