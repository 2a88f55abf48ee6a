# -*- coding: utf-8 -*-
"""Snapshot assembly, pipeline and scheduler."""

from supertoken_holders.services.snapshot.assembler import AssemblyResult, SnapshotAssembler
from supertoken_holders.services.snapshot.scheduler import SnapshotScheduler
from supertoken_holders.services.snapshot.snapshot_pipeline import (
    SnapshotPipeline,
    SnapshotRunResult,
    SnapshotStage,
)
from supertoken_holders.services.snapshot.status_tracker import SnapshotStatus, SnapshotStatusTracker

__all__ = [
    "AssemblyResult",
    "SnapshotAssembler",
    "SnapshotPipeline",
    "SnapshotRunResult",
    "SnapshotScheduler",
    "SnapshotStage",
    "SnapshotStatus",
    "SnapshotStatusTracker",
]
