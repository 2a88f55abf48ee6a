# -*- coding: utf-8 -*-
"""Event bus and event types."""

from supertoken_holders.events.bus import get_event_bus, set_event_bus, shutdown_event_bus
from supertoken_holders.events.snapshots import SnapshotFailedEvent, SnapshotPublishedEvent

__all__ = [
    "get_event_bus",
    "set_event_bus",
    "shutdown_event_bus",
    "SnapshotFailedEvent",
    "SnapshotPublishedEvent",
]
