# -*- coding: utf-8 -*-
"""Read-side services: holder pages and single-account balances."""

from supertoken_holders.services.holders.account_balance_service import (
    AccountBalance,
    AccountBalanceService,
)
from supertoken_holders.services.holders.holder_query_service import HolderQueryService

__all__ = ["AccountBalance", "AccountBalanceService", "HolderQueryService"]
