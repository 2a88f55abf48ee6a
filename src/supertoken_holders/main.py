# -*- coding: utf-8 -*-
"""
Entry point for the Super token holder snapshot service.

Orchestrates: logging, settings, container, scheduler (hydrate from disk, then
periodic pipeline runs), shutdown (SIGINT or CancelledError).

Run with: python -m supertoken_holders.main

Notebook usage:
    from supertoken_holders.main import run
    await run()  # Interrupt kernel to stop; system will shut down on CancelledError.
"""
from __future__ import annotations

import asyncio
import signal
import structlog
from typing import Any

from supertoken_holders.DI import Container
from supertoken_holders.config import get_settings
from supertoken_holders.events import shutdown_event_bus
from supertoken_holders.exceptions import MissingRequiredConfigError
from supertoken_holders.logging.config import configure_logging


def _setup_sigint(shutdown_event: asyncio.Event) -> None:
    try:
        loop = asyncio.get_running_loop()
        loop.add_signal_handler(
            signal.SIGINT,
            lambda: shutdown_event.set(),
        )
    except NotImplementedError:
        pass  # Windows has no add_signal_handler


async def _do_shutdown(logger: Any, container: Container) -> None:
    """Clean shutdown. Safe to call on normal shutdown or CancelledError."""
    container.snapshot_status_tracker().stop()
    await shutdown_event_bus()
    await container.http_client().aclose()
    logger.info("main_shutdown_complete")


async def run() -> None:
    configure_logging()
    logger = structlog.get_logger("main")
    settings = get_settings()
    if not settings.snapshot.tokens and not settings.token_list.enabled:
        logger.error(
            "main_missing_targets",
            message="SNAPSHOT__TOKENS is empty and TOKEN_LIST__ENABLED is false",
        )
        raise MissingRequiredConfigError("SNAPSHOT__TOKENS")

    container = Container()
    container.snapshot_status_tracker().start()
    scheduler = container.snapshot_scheduler()
    shutdown_event = asyncio.Event()
    _setup_sigint(shutdown_event)

    logger.info(
        "main_started",
        networks=[n.name for n in settings.networks.networks],
        interval_seconds=settings.snapshot.interval_seconds,
        token_list_enabled=settings.token_list.enabled,
    )
    try:
        await scheduler.run(shutdown_event)
    finally:
        await _do_shutdown(logger, container)


def main() -> None:
    asyncio.run(run())


__all__ = ["run", "main"]

if __name__ == "__main__":
    main()
