"""Snapshot lifecycle events (emitted by SnapshotPipeline)."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from bubus import BaseEvent  # type: ignore[import-untyped]


class SnapshotPublishedEvent(BaseEvent[None]):
    """Emitted after a snapshot has replaced the previous one for its key."""

    chain_id: int
    token_address: str
    block_number: int
    generated_at: datetime
    holders_count: int
    unresolved_count: int = 0
    batch_count: int = 0
    retries_count: int = 0


class SnapshotFailedEvent(BaseEvent[None]):
    """Emitted when a pipeline run aborts. The previous snapshot stays published."""

    chain_id: int
    token_address: str
    stage: str
    """Stage that was running when the error surfaced (paginating, verifying, ...)."""

    error_type: str
    error_message: Optional[str] = None
