# -*- coding: utf-8 -*-
"""Repositories: interfaces (abstractions) and implementations (file, in_memory)."""

from supertoken_holders.persistence.repositories.file import JsonFileSnapshotBackup
from supertoken_holders.persistence.repositories.in_memory import InMemorySnapshotBackup
from supertoken_holders.persistence.repositories.interfaces import ISnapshotBackup

__all__ = [
    "ISnapshotBackup",
    "InMemorySnapshotBackup",
    "JsonFileSnapshotBackup",
]
