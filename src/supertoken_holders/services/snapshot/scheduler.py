"""Scheduler: hydrates snapshots from disk, then runs the pipeline for every target on an interval."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any, Optional

import structlog

from supertoken_holders.config import Settings, TokenTarget
from supertoken_holders.exceptions import HolderSnapshotError
from supertoken_holders.persistence import SnapshotStore
from supertoken_holders.services.snapshot.snapshot_pipeline import SnapshotPipeline, SnapshotRunResult
from supertoken_holders.services.tokens import TokenRegistry


class SnapshotScheduler:
    """Runs SnapshotPipeline for each (network, token) target until shutdown_event or CancelledError.

    The first pass starts immediately; later passes start every
    snapshot.interval_seconds. Targets run as separate tasks, at most
    snapshot.max_concurrent_jobs at a time.
    """

    def __init__(
        self,
        pipeline: SnapshotPipeline,
        store: SnapshotStore,
        settings: Settings,
        registry: Optional[TokenRegistry] = None,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            pipeline: Snapshot pipeline (injected).
            store: Snapshot store, hydrated from its backup at startup (injected).
            settings: Application settings (uses settings.snapshot).
            registry: Optional; when set, targets come from the registry (refreshed
                every pass) instead of settings.snapshot.tokens.
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._pipeline = pipeline
        self._store = store
        self._settings = settings
        self._registry = registry
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def targets(self) -> list[TokenTarget]:
        """Return the current targets, refreshing the registry first when there is one."""
        if self._registry is None:
            return list(self._settings.snapshot.tokens)
        try:
            await self._registry.refresh()
        except HolderSnapshotError as e:
            self._logger.warning(
                "scheduler_registry_refresh_failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
        return self._registry.targets()

    async def hydrate(self, targets: list[TokenTarget]) -> int:
        """Load persisted snapshots for targets into the store. Returns how many were loaded."""
        loaded = 0
        for target in targets:
            network = self._settings.networks.network_by_name(target.network)
            if network is None:
                continue
            if await self._store.load(network.chain_id, target.token_address) is not None:
                loaded += 1
        self._logger.info(
            "scheduler_hydrated",
            targets_count=len(targets),
            snapshots_loaded=loaded,
        )
        return loaded

    async def run_pass(self, targets: list[TokenTarget]) -> list[SnapshotRunResult]:
        """Run the pipeline once for every target, bounded by max_concurrent_jobs."""
        semaphore = asyncio.Semaphore(max(1, self._settings.snapshot.max_concurrent_jobs))

        async def _run_one(target: TokenTarget) -> SnapshotRunResult:
            async with semaphore:
                return await self._pipeline.run(target.network, target.token_address)

        results = await asyncio.gather(*(_run_one(t) for t in targets))
        self._logger.info(
            "scheduler_pass_completed",
            targets_count=len(targets),
            succeeded=sum(1 for r in results if r.success),
            failed=sum(1 for r in results if not r.success and not r.skipped),
            skipped=sum(1 for r in results if r.skipped),
        )
        return list(results)

    async def run(self, shutdown_event: asyncio.Event) -> None:
        """Hydrate, then run passes until shutdown_event is set.

        CancelledError propagates after in-flight runs are cancelled.
        """
        interval = self._settings.snapshot.interval_seconds
        targets = await self.targets()
        self._logger.info(
            "scheduler_started",
            targets_count=len(targets),
            interval_seconds=interval,
            max_concurrent_jobs=self._settings.snapshot.max_concurrent_jobs,
        )
        await self.hydrate(targets)

        while not shutdown_event.is_set():
            await self.run_pass(targets)
            try:
                await asyncio.wait_for(shutdown_event.wait(), timeout=interval)
            except asyncio.TimeoutError:
                targets = await self.targets()
        self._logger.info("scheduler_stopped")
