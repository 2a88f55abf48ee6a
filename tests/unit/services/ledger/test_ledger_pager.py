# -*- coding: utf-8 -*-
"""Unit tests for LedgerPager."""

from __future__ import annotations

from collections.abc import Callable
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock

import pytest

from supertoken_holders.exceptions import LedgerQueryError
from supertoken_holders.models.ledger_record import LedgerRecord
from supertoken_holders.services.ledger import LedgerPager


def _page(record_factory: Callable[..., LedgerRecord], start: int, count: int) -> list[LedgerRecord]:
    return [record_factory(n) for n in range(start, start + count)]


async def test_fetch_all_full_page_then_short_page_issues_two_requests(
    record_factory: Callable[..., LedgerRecord],
    token_address: str,
) -> None:
    first = _page(record_factory, 1, 1000)
    second = _page(record_factory, 1001, 1)
    subgraph: Any = SimpleNamespace(get_account_token_snapshots_page=AsyncMock(side_effect=[first, second]))
    pager = LedgerPager(subgraph, page_size=1000)

    records = await pager.fetch_all("base-mainnet", token_address)

    assert len(records) == 1001
    assert subgraph.get_account_token_snapshots_page.await_count == 2
    first_call, second_call = subgraph.get_account_token_snapshots_page.await_args_list
    assert first_call.kwargs["last_id"] == ""
    assert second_call.kwargs["last_id"] == first[-1].id
    assert second_call.kwargs["first"] == 1000


async def test_fetch_all_empty_ledger_issues_one_request(token_address: str) -> None:
    subgraph: Any = SimpleNamespace(get_account_token_snapshots_page=AsyncMock(return_value=[]))
    pager = LedgerPager(subgraph)

    assert await pager.fetch_all("base-mainnet", token_address) == []
    assert subgraph.get_account_token_snapshots_page.await_count == 1


async def test_exactly_full_page_requests_one_more_page(
    record_factory: Callable[..., LedgerRecord],
    token_address: str,
) -> None:
    subgraph: Any = SimpleNamespace(
        get_account_token_snapshots_page=AsyncMock(side_effect=[_page(record_factory, 1, 2), []])
    )
    pager = LedgerPager(subgraph, page_size=2)

    records = await pager.fetch_all("base-mainnet", token_address)

    assert len(records) == 2
    assert subgraph.get_account_token_snapshots_page.await_count == 2


async def test_page_error_aborts_pagination(
    record_factory: Callable[..., LedgerRecord],
    token_address: str,
) -> None:
    subgraph: Any = SimpleNamespace(
        get_account_token_snapshots_page=AsyncMock(
            side_effect=[_page(record_factory, 1, 2), LedgerQueryError("boom", network="base-mainnet")]
        )
    )
    pager = LedgerPager(subgraph, page_size=2)

    with pytest.raises(LedgerQueryError):
        await pager.fetch_all("base-mainnet", token_address)


async def test_iter_records_is_lazy(
    record_factory: Callable[..., LedgerRecord],
    token_address: str,
) -> None:
    subgraph: Any = SimpleNamespace(
        get_account_token_snapshots_page=AsyncMock(
            side_effect=[_page(record_factory, 1, 2), _page(record_factory, 3, 1)]
        )
    )
    pager = LedgerPager(subgraph, page_size=2)

    iterator = pager.iter_records("base-mainnet", token_address)
    first = await iterator.__anext__()

    assert first.account == record_factory(1).account
    assert subgraph.get_account_token_snapshots_page.await_count == 1
    await iterator.aclose()
