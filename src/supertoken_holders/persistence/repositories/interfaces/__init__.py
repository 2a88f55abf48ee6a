"""Repository interfaces."""

from supertoken_holders.persistence.repositories.interfaces.snapshot_backup import ISnapshotBackup

__all__ = ["ISnapshotBackup"]
