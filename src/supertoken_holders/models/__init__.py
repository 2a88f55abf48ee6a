# -*- coding: utf-8 -*-
"""Domain models."""

from supertoken_holders.models.ledger_record import LedgerRecord, PoolMembership
from supertoken_holders.models.token_snapshot import (
    HolderPage,
    HolderRecord,
    SnapshotKey,
    TokenSnapshot,
    holder_sort_key,
)

__all__ = [
    "HolderPage",
    "HolderRecord",
    "LedgerRecord",
    "PoolMembership",
    "SnapshotKey",
    "TokenSnapshot",
    "holder_sort_key",
]
