# -*- coding: utf-8 -*-
"""Reconciliation planning (ledger-trusted vs needs-verification)."""

from supertoken_holders.services.reconciliation.planner import (
    AccountClass,
    ReconciliationPlan,
    ReconciliationPlanner,
    classify,
)

__all__ = ["AccountClass", "ReconciliationPlan", "ReconciliationPlanner", "classify"]
