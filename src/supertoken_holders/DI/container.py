# -*- coding: utf-8 -*-
"""Dependency injection container (dependency-injector)."""

from __future__ import annotations

from dependency_injector import containers, providers

from supertoken_holders.config import Settings, get_settings
from supertoken_holders.events.bus import get_event_bus
from supertoken_holders.clients.http import AsyncHttpClient
from supertoken_holders.clients.rpc_client import RpcClient
from supertoken_holders.clients.subgraph import SubgraphClient
from supertoken_holders.clients.token_list import TokenListClient
from supertoken_holders.persistence import SnapshotStore
from supertoken_holders.persistence.repositories.file import JsonFileSnapshotBackup
from supertoken_holders.services.holders import AccountBalanceService, HolderQueryService
from supertoken_holders.services.ledger import LedgerPager
from supertoken_holders.services.reconciliation import ReconciliationPlanner
from supertoken_holders.services.snapshot import (
    SnapshotAssembler,
    SnapshotPipeline,
    SnapshotScheduler,
    SnapshotStatusTracker,
)
from supertoken_holders.services.tokens import TokenRegistry
from supertoken_holders.services.verification import RetryPolicy, RpcBalanceVerifier


def _build_retry_policy(settings: Settings) -> RetryPolicy:
    return RetryPolicy.from_settings(settings.snapshot)


def _build_verifier(settings: Settings, rpc_client: RpcClient, retry_policy: RetryPolicy) -> RpcBalanceVerifier:
    """Build the verifier with batch size and in-flight ceiling from settings."""
    sn = settings.snapshot
    return RpcBalanceVerifier(
        rpc_client,
        batch_size=sn.rpc_batch_size,
        retry_policy=retry_policy,
        max_in_flight=sn.max_in_flight_rpc,
    )


class Container(containers.DeclarativeContainer):
    """Application container. Wires settings, HTTP client, ledger/RPC clients, pipeline, store."""

    config = providers.Callable(get_settings)

    http_client = providers.Singleton(
        AsyncHttpClient,
        settings=config,
    )

    subgraph_client = providers.Singleton(
        SubgraphClient,
        http_client=http_client,
        settings=config,
    )

    rpc_client = providers.Singleton(
        RpcClient,
        http_client=http_client,
        settings=config,
    )

    token_list_client = providers.Singleton(
        TokenListClient,
        http_client=http_client,
        settings=config,
    )

    token_registry = providers.Singleton(
        TokenRegistry,
        settings=config,
        token_list_client=token_list_client,
    )

    event_bus = providers.Callable(get_event_bus)

    ledger_pager = providers.Singleton(
        LedgerPager,
        subgraph_client=subgraph_client,
        page_size=providers.Callable(lambda s: s.snapshot.page_size, config),
    )

    reconciliation_planner = providers.Singleton(
        ReconciliationPlanner,
        verify_all=providers.Callable(lambda s: s.snapshot.verify_all_accounts, config),
    )

    retry_policy = providers.Singleton(_build_retry_policy, config)

    balance_verifier = providers.Singleton(_build_verifier, config, rpc_client, retry_policy)

    snapshot_assembler = providers.Singleton(SnapshotAssembler)

    snapshot_backup = providers.Singleton(
        JsonFileSnapshotBackup,
        data_dir=providers.Callable(lambda s: s.snapshot.data_dir, config),
    )

    snapshot_store = providers.Singleton(
        SnapshotStore,
        backup=snapshot_backup,
    )

    snapshot_pipeline = providers.Singleton(
        SnapshotPipeline,
        ledger_pager=ledger_pager,
        verifier=balance_verifier,
        planner=reconciliation_planner,
        assembler=snapshot_assembler,
        store=snapshot_store,
        settings=config,
        event_bus=event_bus,
    )

    snapshot_status_tracker = providers.Singleton(
        SnapshotStatusTracker,
        event_bus=event_bus,
    )

    snapshot_scheduler = providers.Singleton(
        SnapshotScheduler,
        pipeline=snapshot_pipeline,
        store=snapshot_store,
        settings=config,
        registry=token_registry,
    )

    holder_query_service = providers.Singleton(
        HolderQueryService,
        store=snapshot_store,
        registry=token_registry,
    )

    account_balance_service = providers.Singleton(
        AccountBalanceService,
        rpc_client=rpc_client,
        subgraph_client=subgraph_client,
        settings=config,
        registry=token_registry,
    )
