# -*- coding: utf-8 -*-
"""Unit tests for SubgraphClient."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock

import pytest

from supertoken_holders.clients.subgraph import SubgraphClient
from supertoken_holders.config import Settings
from supertoken_holders.exceptions import HttpRequestError, LedgerQueryError

ACCOUNT = "0x" + "ab" * 20


def _item(account: str = ACCOUNT, **overrides: Any) -> dict[str, Any]:
    item: dict[str, Any] = {
        "id": f"{account}-token",
        "totalNetFlowRate": "-1000",
        "balanceUntilUpdatedAt": "1000000000000000000000000",
        "updatedAtTimestamp": "1700000000",
        "updatedAtBlockNumber": "123",
        "account": {
            "id": account.upper().replace("0X", "0x"),
            "poolMemberships": [
                {
                    "id": "m1",
                    "units": "10",
                    "isConnected": False,
                    "pool": {"id": "0xPOOL", "perUnitFlowRate": "7"},
                }
            ],
        },
    }
    item.update(overrides)
    return item


def _client(settings: Settings, response: Any) -> tuple[SubgraphClient, Any]:
    http: Any = SimpleNamespace(post=AsyncMock(return_value=response))
    return SubgraphClient(http, settings), http


async def test_page_parses_records_into_integers(settings: Settings, token_address: str) -> None:
    client, http = _client(settings, {"data": {"accountTokenSnapshots": [_item()]}})

    records = await client.get_account_token_snapshots_page("base-mainnet", token_address, last_id="", first=1000)

    assert len(records) == 1
    record = records[0]
    assert record.account == ACCOUNT
    assert record.ledger_balance == 10**24
    assert record.net_flow_rate == -1000
    assert record.last_update_block == 123
    assert record.pool_memberships[0].per_unit_flow_rate == 7
    assert record.pool_memberships[0].units_held == 10
    assert record.pool_memberships[0].connected is False
    assert record.pool_memberships[0].pool_id == "0xpool"

    url = http.post.await_args.args[0]
    body = http.post.await_args.kwargs["json"]
    assert url == "https://subgraph.test/base-mainnet"
    assert body["variables"] == {
        "token": token_address,
        "lastId": "",
        "first": 1000,
        "poolLimit": settings.snapshot.pool_memberships_limit,
    }
    assert "id_gt: $lastId" in body["query"]
    assert "orderBy: id" in body["query"]


async def test_graphql_errors_abort_instead_of_ending_pagination(settings: Settings, token_address: str) -> None:
    client, _ = _client(settings, {"data": None, "errors": [{"message": "indexer down"}]})

    with pytest.raises(LedgerQueryError) as exc_info:
        await client.get_account_token_snapshots_page("base-mainnet", token_address, last_id="0xabc")

    assert exc_info.value.cursor == "0xabc"
    assert exc_info.value.errors == [{"message": "indexer down"}]


async def test_malformed_record_raises(settings: Settings, token_address: str) -> None:
    client, _ = _client(
        settings,
        {"data": {"accountTokenSnapshots": [_item(balanceUntilUpdatedAt="1.5")]}},
    )

    with pytest.raises(LedgerQueryError):
        await client.get_account_token_snapshots_page("base-mainnet", token_address)


async def test_transport_failure_becomes_ledger_query_error(settings: Settings, token_address: str) -> None:
    http: Any = SimpleNamespace(post=AsyncMock(side_effect=HttpRequestError("timeout", url="u")))
    client = SubgraphClient(http, settings)

    with pytest.raises(LedgerQueryError):
        await client.get_account_token_snapshots_page("base-mainnet", token_address)


async def test_single_account_lookup_uses_composite_id(settings: Settings, token_address: str) -> None:
    client, http = _client(settings, {"data": {"accountTokenSnapshot": _item()}})

    record = await client.get_account_token_snapshot("base-mainnet", token_address, ACCOUNT)

    assert record is not None and record.account == ACCOUNT
    assert http.post.await_args.kwargs["json"]["variables"]["id"] == f"{ACCOUNT}-{token_address}"


async def test_single_account_lookup_returns_none_when_absent(settings: Settings, token_address: str) -> None:
    client, _ = _client(settings, {"data": {"accountTokenSnapshot": None}})

    assert await client.get_account_token_snapshot("base-mainnet", token_address, ACCOUNT) is None
