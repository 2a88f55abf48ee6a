# -*- coding: utf-8 -*-
"""Snapshot lifecycle events."""

from supertoken_holders.events.snapshots.snapshot_events import (
    SnapshotFailedEvent,
    SnapshotPublishedEvent,
)

__all__ = ["SnapshotFailedEvent", "SnapshotPublishedEvent"]
