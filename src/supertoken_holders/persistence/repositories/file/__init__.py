"""File-backed repository implementations."""

from supertoken_holders.persistence.repositories.file.json_snapshot_backup import (
    JsonFileSnapshotBackup,
    SnapshotFileSchema,
)

__all__ = ["JsonFileSnapshotBackup", "SnapshotFileSchema"]
