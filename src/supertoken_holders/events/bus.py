"""Application event bus (bubus). One instance per process carries snapshot lifecycle events."""

from __future__ import annotations

from bubus import EventBus  # type: ignore[import-untyped]

EVENT_BUS_NAME = "SupertokenHolders"

_event_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Return the snapshot event bus, creating it on first call.

    History is kept small: a pass over every configured token emits one event per
    target and nothing replays them.
    """
    global _event_bus
    if _event_bus is None:
        _event_bus = EventBus(
            name=EVENT_BUS_NAME,
            max_history_size=50,
            wal_path=None,
        )
    return _event_bus


def set_event_bus(bus: EventBus | None) -> None:
    """Replace the bus (tests, DI). None resets to the lazy default."""
    global _event_bus
    _event_bus = bus


async def shutdown_event_bus(timeout: float | None = 5.0) -> None:
    """Stop the bus if one was created, letting queued snapshot events drain, then forget it."""
    global _event_bus
    bus, _event_bus = _event_bus, None
    if bus is not None:
        await bus.stop(timeout=timeout)
