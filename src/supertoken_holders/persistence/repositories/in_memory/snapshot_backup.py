# -*- coding: utf-8 -*-
"""In-memory snapshot backup (keyed by chain_id, token_address)."""

from __future__ import annotations

from supertoken_holders.models.token_snapshot import SnapshotKey, TokenSnapshot
from supertoken_holders.persistence.repositories.interfaces.snapshot_backup import ISnapshotBackup


class InMemorySnapshotBackup(ISnapshotBackup):
    """In-memory implementation of ISnapshotBackup."""

    def __init__(self) -> None:
        """Initialize an empty in-memory store."""
        self._store: dict[SnapshotKey, TokenSnapshot] = {}

    async def save(self, snapshot: TokenSnapshot) -> None:
        """Upsert the snapshot (by key)."""
        self._store[snapshot.key] = snapshot

    async def load(self, key: SnapshotKey) -> TokenSnapshot | None:
        """Return the stored snapshot for key, or None if missing."""
        return self._store.get(key)
