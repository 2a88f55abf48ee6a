"""Snapshot pipeline: one run per (chain, token) from ledger pagination to publish."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

import structlog

from supertoken_holders.config import Settings
from supertoken_holders.events.snapshots import SnapshotFailedEvent, SnapshotPublishedEvent
from supertoken_holders.models.token_snapshot import SnapshotKey, TokenSnapshot
from supertoken_holders.persistence import SnapshotStore
from supertoken_holders.services.ledger import LedgerPager
from supertoken_holders.services.reconciliation import ReconciliationPlanner
from supertoken_holders.services.snapshot.assembler import SnapshotAssembler
from supertoken_holders.services.verification import BatchStats, RpcBalanceVerifier

if TYPE_CHECKING:
    from bubus import EventBus  # type: ignore[import-untyped]


class SnapshotStage(str, Enum):
    """Stage of a pipeline run. Every run ends back in IDLE."""

    IDLE = "idle"
    PAGINATING = "paginating"
    PROJECTING = "projecting"
    VERIFYING = "verifying"
    ASSEMBLING = "assembling"
    PUBLISHING = "publishing"


@dataclass(frozen=True)
class SnapshotRunResult:
    """Outcome of one pipeline run."""

    network: str
    chain_id: int | None
    token_address: str
    success: bool
    skipped: bool = False
    """True when another run for the same key was in progress."""

    stage: SnapshotStage = SnapshotStage.IDLE
    """Stage reached (the failing stage when success is False)."""

    snapshot: TokenSnapshot | None = None
    error: str | None = None
    stats: BatchStats | None = None
    unresolved_count: int = 0


class SnapshotPipeline:
    """Runs LedgerPager -> ReconciliationPlanner -> RpcBalanceVerifier -> SnapshotAssembler -> SnapshotStore.

    At most one run per SnapshotKey is in flight; a run that finds its key busy
    is skipped. A failed run publishes nothing and leaves the previous snapshot
    in place.
    """

    def __init__(
        self,
        ledger_pager: LedgerPager,
        verifier: RpcBalanceVerifier,
        planner: ReconciliationPlanner,
        assembler: SnapshotAssembler,
        store: SnapshotStore,
        settings: Settings,
        *,
        event_bus: Optional[EventBus] = None,
        clock: Callable[[], float] = time.time,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            ledger_pager: Subgraph pager (injected).
            verifier: On-chain balance verifier (injected).
            planner: Projection and classification (injected).
            assembler: Snapshot assembler (injected).
            store: Published snapshot store (injected).
            settings: Application settings (networks for chain id lookup).
            event_bus: Optional; if set, emits SnapshotPublishedEvent / SnapshotFailedEvent.
            clock: Wall clock in epoch seconds, used as the projection reference time.
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._pager = ledger_pager
        self._verifier = verifier
        self._planner = planner
        self._assembler = assembler
        self._store = store
        self._settings = settings
        self._event_bus = event_bus
        self._clock = clock
        self._locks: dict[SnapshotKey, asyncio.Lock] = {}
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def is_running(self, chain_id: int, token_address: str) -> bool:
        lock = self._locks.get(SnapshotKey.of(chain_id, token_address))
        return lock is not None and lock.locked()

    async def run(self, network: str, token_address: str) -> SnapshotRunResult:
        """Build and publish a fresh snapshot for token_address on network.

        Never raises for run failures; they are logged, emitted as
        SnapshotFailedEvent and returned as a failed SnapshotRunResult.
        """
        token_address = token_address.strip().lower()
        network_config = self._settings.networks.network_by_name(network)
        if network_config is None:
            self._logger.error(
                "snapshot_unknown_network",
                network=network,
                token_address=token_address,
            )
            return SnapshotRunResult(
                network=network,
                chain_id=None,
                token_address=token_address,
                success=False,
                error=f"Unknown network: {network}",
            )

        key = SnapshotKey.of(network_config.chain_id, token_address)
        lock = self._locks.setdefault(key, asyncio.Lock())
        if lock.locked():
            self._logger.info(
                "snapshot_run_skipped",
                chain_id=key.chain_id,
                token_address=key.token_address,
                reason="already_running",
            )
            return SnapshotRunResult(
                network=network,
                chain_id=key.chain_id,
                token_address=key.token_address,
                success=False,
                skipped=True,
            )

        async with lock:
            with structlog.contextvars.bound_contextvars(
                chain_id=key.chain_id,
                token_address=key.token_address,
            ):
                return await self._run_locked(network, key)

    async def _run_locked(self, network: str, key: SnapshotKey) -> SnapshotRunResult:
        stage = SnapshotStage.PAGINATING
        started = time.perf_counter()
        self._logger.info("snapshot_run_started", network=network)
        try:
            records = await self._pager.fetch_all(network, key.token_address)

            stage = SnapshotStage.PROJECTING
            reference_timestamp = int(self._clock())
            chain_head = await self._verifier.read_chain_head(network)
            plan = self._planner.plan(records, chain_head, reference_timestamp)

            stage = SnapshotStage.VERIFYING
            stats: BatchStats | None = None
            verified: dict[str, int] = {}
            block_number = chain_head
            if plan.needs_verification:
                verification = await self._verifier.verify(
                    network, key.token_address, plan.needs_verification
                )
                verified = verification.balances
                block_number = verification.block_number
                stats = verification.stats

            stage = SnapshotStage.ASSEMBLING
            assembly = self._assembler.assemble(
                chain_id=key.chain_id,
                token_address=key.token_address,
                records=records,
                plan=plan,
                verified_balances=verified,
                block_number=block_number,
                generated_at=datetime.now(UTC),
            )

            stage = SnapshotStage.PUBLISHING
            await self._store.publish(assembly.snapshot)
        except Exception as e:
            self._logger.error(
                "snapshot_run_failed",
                network=network,
                snapshot_stage=stage.value,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            await self._dispatch_failed(key, stage, e)
            return SnapshotRunResult(
                network=network,
                chain_id=key.chain_id,
                token_address=key.token_address,
                success=False,
                stage=stage,
                error=str(e),
            )

        snapshot = assembly.snapshot
        self._logger.info(
            "snapshot_run_completed",
            network=network,
            block_number=snapshot.block_number,
            holders_count=len(snapshot.holders),
            unresolved_count=len(assembly.unresolved_accounts),
            duration_seconds=round(time.perf_counter() - started, 3),
        )
        await self._dispatch_published(snapshot, len(assembly.unresolved_accounts), stats)
        return SnapshotRunResult(
            network=network,
            chain_id=key.chain_id,
            token_address=key.token_address,
            success=True,
            stage=SnapshotStage.IDLE,
            snapshot=snapshot,
            stats=stats,
            unresolved_count=len(assembly.unresolved_accounts),
        )

    async def _dispatch_published(
        self,
        snapshot: TokenSnapshot,
        unresolved_count: int,
        stats: BatchStats | None,
    ) -> None:
        """Emit SnapshotPublishedEvent on the event bus and wait until processing completes."""
        if self._event_bus is None:
            return
        event = SnapshotPublishedEvent(
            chain_id=snapshot.chain_id,
            token_address=snapshot.token_address,
            block_number=snapshot.block_number,
            generated_at=snapshot.generated_at,
            holders_count=len(snapshot.holders),
            unresolved_count=unresolved_count,
            batch_count=stats.batch_count if stats else 0,
            retries_count=stats.retries_count if stats else 0,
        )
        dispatched = self._event_bus.dispatch(event)
        await dispatched

    async def _dispatch_failed(self, key: SnapshotKey, stage: SnapshotStage, error: Exception) -> None:
        if self._event_bus is None:
            return
        event = SnapshotFailedEvent(
            chain_id=key.chain_id,
            token_address=key.token_address,
            stage=stage.value,
            error_type=type(error).__name__,
            error_message=str(error),
        )
        dispatched = self._event_bus.dispatch(event)
        await dispatched
