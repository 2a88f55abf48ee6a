# -*- coding: utf-8 -*-
"""Unit tests for RpcClient."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock

import pytest

from supertoken_holders.clients.rpc_client import SELECTOR_BALANCE_OF, RpcClient
from supertoken_holders.config import Settings
from supertoken_holders.exceptions import HttpRequestError, RpcError

OWNER = "0x" + "ab" * 20


def _client(settings: Settings, *responses: Any) -> tuple[RpcClient, Any]:
    http: Any = SimpleNamespace(post=AsyncMock(side_effect=list(responses)))
    return RpcClient(http, settings), http


async def test_get_block_number_parses_hex_quantity(settings: Settings) -> None:
    client, http = _client(settings, {"jsonrpc": "2.0", "id": 1, "result": "0x1b4"})

    assert await client.get_block_number("base-mainnet") == 436
    assert http.post.await_args.args[0] == "https://rpc.test/base-mainnet"
    assert http.post.await_args.kwargs["json"]["method"] == "eth_blockNumber"


async def test_balance_of_is_called_at_explicit_block(settings: Settings, token_address: str) -> None:
    client, http = _client(settings, {"result": "0x" + "0" * 63 + "f"})

    balance = await client.get_erc20_balance_raw("base-mainnet", token_address, OWNER, block=256)

    assert balance == 15
    params = http.post.await_args.kwargs["json"]["params"]
    assert params[0] == {
        "to": token_address,
        "data": SELECTOR_BALANCE_OF + "0" * 24 + OWNER[2:],
    }
    assert params[1] == "0x100"


async def test_empty_result_is_zero(settings: Settings, token_address: str) -> None:
    client, _ = _client(settings, {"result": "0x"})

    assert await client.get_erc20_balance_raw("base-mainnet", token_address, OWNER, block=1) == 0


@pytest.mark.parametrize(
    "response",
    [
        {"error": {"code": -32000, "message": "header not found"}},
        {"jsonrpc": "2.0", "id": 1},
        {"result": "not-hex"},
        ["unexpected"],
    ],
)
async def test_bad_responses_raise_rpc_error(settings: Settings, response: Any) -> None:
    client, _ = _client(settings, response)

    with pytest.raises(RpcError):
        await client.get_block_number("base-mainnet")


async def test_error_object_code_is_kept(settings: Settings) -> None:
    client, _ = _client(settings, {"error": {"code": -32005, "message": "limit"}})

    with pytest.raises(RpcError) as exc_info:
        await client.get_block_number("base-mainnet")

    assert exc_info.value.code == -32005
    assert exc_info.value.method == "eth_blockNumber"


async def test_transport_failure_becomes_rpc_error(settings: Settings) -> None:
    http: Any = SimpleNamespace(post=AsyncMock(side_effect=HttpRequestError("refused", url="u")))
    client = RpcClient(http, settings)

    with pytest.raises(RpcError):
        await client.get_block_number("base-mainnet")
