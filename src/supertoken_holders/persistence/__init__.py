# -*- coding: utf-8 -*-
"""Persistence: published snapshot store and its durable backups."""

from supertoken_holders.persistence.snapshot_store import SnapshotStore

__all__ = ["SnapshotStore"]
