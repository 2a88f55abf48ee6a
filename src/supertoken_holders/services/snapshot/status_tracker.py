# -*- coding: utf-8 -*-
"""SnapshotStatusTracker: listens to snapshot events and keeps the last outcome per key."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Callable, Optional

import structlog

from supertoken_holders.events.snapshots import SnapshotFailedEvent, SnapshotPublishedEvent
from supertoken_holders.models.token_snapshot import SnapshotKey

if TYPE_CHECKING:
    from bubus import EventBus  # type: ignore[import-untyped]


@dataclass(frozen=True, slots=True)
class SnapshotStatus:
    """Last known pipeline outcome for one (chain_id, token_address)."""

    key: SnapshotKey
    last_published_block: int | None = None
    last_published_at: datetime | None = None
    holders_count: int = 0
    last_failed_at: datetime | None = None
    last_failed_stage: str | None = None
    last_error: str | None = None
    consecutive_failures: int = 0


class SnapshotStatusTracker:
    """Subscribes to SnapshotPublishedEvent / SnapshotFailedEvent and records per-key status."""

    def __init__(
        self,
        event_bus: Any,
        *,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._event_bus: "EventBus" = event_bus
        self._clock = clock
        self._statuses: dict[SnapshotKey, SnapshotStatus] = {}
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def start(self) -> None:
        """Subscribe to snapshot events."""
        self._event_bus.on(SnapshotPublishedEvent, self._on_published)
        self._event_bus.on(SnapshotFailedEvent, self._on_failed)
        self._logger.debug("snapshot_status_tracker_started")

    def stop(self) -> None:
        """Unsubscribe from snapshot events."""
        handlers = getattr(self._event_bus, "handlers", {})
        for event_cls, handler in (
            (SnapshotPublishedEvent, self._on_published),
            (SnapshotFailedEvent, self._on_failed),
        ):
            key = event_cls.__name__
            if key in handlers:
                handlers[key] = [h for h in handlers[key] if h != handler]
        self._logger.debug("snapshot_status_tracker_stopped")

    def status(self, chain_id: int, token_address: str) -> SnapshotStatus | None:
        return self._statuses.get(SnapshotKey.of(chain_id, token_address))

    def statuses(self) -> list[SnapshotStatus]:
        return list(self._statuses.values())

    def _current(self, key: SnapshotKey) -> SnapshotStatus:
        return self._statuses.get(key) or SnapshotStatus(key=key)

    def _on_published(self, event: SnapshotPublishedEvent) -> None:
        key = SnapshotKey.of(event.chain_id, event.token_address)
        self._statuses[key] = replace(
            self._current(key),
            last_published_block=event.block_number,
            last_published_at=event.generated_at,
            holders_count=event.holders_count,
            consecutive_failures=0,
        )

    def _on_failed(self, event: SnapshotFailedEvent) -> None:
        key = SnapshotKey.of(event.chain_id, event.token_address)
        current = self._current(key)
        updated = replace(
            current,
            last_failed_at=self._clock(),
            last_failed_stage=event.stage,
            last_error=event.error_message,
            consecutive_failures=current.consecutive_failures + 1,
        )
        self._statuses[key] = updated
        if updated.consecutive_failures > 1:
            self._logger.warning(
                "snapshot_repeated_failures",
                chain_id=key.chain_id,
                token_address=key.token_address,
                consecutive_failures=updated.consecutive_failures,
                snapshot_stage=event.stage,
                last_published_block=updated.last_published_block,
            )
