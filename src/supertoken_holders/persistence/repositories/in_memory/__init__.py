"""In-memory repository implementations."""

from supertoken_holders.persistence.repositories.in_memory.snapshot_backup import (
    InMemorySnapshotBackup,
)

__all__ = ["InMemorySnapshotBackup"]
