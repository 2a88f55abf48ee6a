# -*- coding: utf-8 -*-
"""Application services."""

from supertoken_holders.services.ledger import LedgerPager
from supertoken_holders.services.projection import ProjectedBalance, effective_net_flow_rate, project
from supertoken_holders.services.reconciliation import ReconciliationPlan, ReconciliationPlanner
from supertoken_holders.services.verification import RetryPolicy, RpcBalanceVerifier
from supertoken_holders.services.tokens import RegisteredToken, TokenRegistry
from supertoken_holders.services.snapshot import (
    SnapshotAssembler,
    SnapshotPipeline,
    SnapshotRunResult,
    SnapshotScheduler,
    SnapshotStage,
    SnapshotStatusTracker,
)
from supertoken_holders.services.holders import (
    AccountBalance,
    AccountBalanceService,
    HolderQueryService,
)

__all__ = [
    "AccountBalance",
    "AccountBalanceService",
    "HolderQueryService",
    "LedgerPager",
    "ProjectedBalance",
    "ReconciliationPlan",
    "ReconciliationPlanner",
    "RegisteredToken",
    "RetryPolicy",
    "RpcBalanceVerifier",
    "SnapshotAssembler",
    "SnapshotPipeline",
    "SnapshotRunResult",
    "SnapshotScheduler",
    "SnapshotStage",
    "SnapshotStatusTracker",
    "TokenRegistry",
    "effective_net_flow_rate",
    "project",
]
