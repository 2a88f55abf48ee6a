"""Abstract interface for durable snapshot storage (file, in-memory, etc.)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from supertoken_holders.models.token_snapshot import SnapshotKey, TokenSnapshot


class ISnapshotBackup(ABC):
    """Interface for persisting one TokenSnapshot per (chain_id, token_address)."""

    @abstractmethod
    async def save(self, snapshot: TokenSnapshot) -> None:
        """Write the snapshot, replacing any previous record for its key."""
        ...

    @abstractmethod
    async def load(self, key: SnapshotKey) -> TokenSnapshot | None:
        """Return the stored snapshot for key, or None if missing or unreadable."""
        ...
