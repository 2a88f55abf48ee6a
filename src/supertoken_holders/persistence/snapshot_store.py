# -*- coding: utf-8 -*-
"""Published holder snapshots: atomic in-memory replace plus durable backup."""

from __future__ import annotations

import threading
import structlog
from collections.abc import Callable
from typing import Any, Optional

from supertoken_holders.exceptions import InvalidQueryError
from supertoken_holders.models.token_snapshot import HolderPage, SnapshotKey, TokenSnapshot
from supertoken_holders.persistence.repositories.interfaces.snapshot_backup import ISnapshotBackup
from supertoken_holders.utils.validation import parse_int_amount

MAX_PAGE_LIMIT = 1_000_000
DEFAULT_PAGE_LIMIT = 100


class SnapshotStore:
    """Holds the latest published TokenSnapshot per SnapshotKey.

    Readers always get a whole snapshot: publish swaps a single reference under a
    lock, so a reader sees either the previous snapshot or the new one. The
    durable backup is written after the swap; the in-memory snapshot stays
    authoritative if that write fails.
    """

    def __init__(
        self,
        backup: Optional[ISnapshotBackup] = None,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._backup = backup
        self._snapshots: dict[SnapshotKey, TokenSnapshot] = {}
        self._lock = threading.Lock()
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def get(self, key: SnapshotKey) -> TokenSnapshot | None:
        """Return the published snapshot for key, or None."""
        with self._lock:
            return self._snapshots.get(key)

    def keys(self) -> list[SnapshotKey]:
        with self._lock:
            return list(self._snapshots)

    async def publish(self, snapshot: TokenSnapshot) -> None:
        """Replace the snapshot for its key, then persist it to the backup."""
        key = snapshot.key
        with self._lock:
            self._snapshots[key] = snapshot
        self._logger.info(
            "snapshot_published",
            chain_id=key.chain_id,
            token_address=key.token_address,
            block_number=snapshot.block_number,
            holders_count=len(snapshot.holders),
        )
        if self._backup is None:
            return
        try:
            await self._backup.save(snapshot)
        except OSError as e:
            self._logger.error(
                "snapshot_backup_write_failed",
                chain_id=key.chain_id,
                token_address=key.token_address,
                error_type=type(e).__name__,
                error_message=str(e),
            )

    async def load(self, chain_id: int, token_address: str) -> TokenSnapshot | None:
        """Hydrate the in-memory entry from the durable backup (startup).

        An entry already published in memory is kept; the backup only fills gaps.
        """
        key = SnapshotKey.of(chain_id, token_address)
        if self._backup is None:
            return self.get(key)
        snapshot = await self._backup.load(key)
        if snapshot is None:
            return self.get(key)
        with self._lock:
            current = self._snapshots.setdefault(key, snapshot)
        if current is snapshot:
            self._logger.info(
                "snapshot_hydrated",
                chain_id=key.chain_id,
                token_address=key.token_address,
                block_number=snapshot.block_number,
                holders_count=len(snapshot.holders),
            )
        return current

    def read(
        self,
        chain_id: int,
        token_address: str,
        limit: int = DEFAULT_PAGE_LIMIT,
        offset: int = 0,
        min_balance_wei: str | int = "1",
    ) -> HolderPage:
        """Return one page of holders with balance >= min_balance_wei.

        limit is capped at MAX_PAGE_LIMIT. Unknown keys yield an empty page with
        block_number 0.

        Raises:
            InvalidQueryError: If limit, offset or min_balance_wei is not a
                valid non-negative integer.
        """
        try:
            min_balance = parse_int_amount(min_balance_wei, field="min_balance_wei")
        except ValueError as e:
            raise InvalidQueryError(str(e)) from e
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
            raise InvalidQueryError(f"limit must be a non-negative integer, got {limit!r}")
        if isinstance(offset, bool) or not isinstance(offset, int) or offset < 0:
            raise InvalidQueryError(f"offset must be a non-negative integer, got {offset!r}")
        limit = min(limit, MAX_PAGE_LIMIT)

        key = SnapshotKey.of(chain_id, token_address)
        snapshot = self.get(key)
        if snapshot is None:
            return HolderPage(
                chain_id=key.chain_id,
                token_address=key.token_address,
                block_number=0,
                generated_at=None,
                limit=limit,
                offset=offset,
                holders=(),
            )

        eligible = [h for h in snapshot.holders if h.balance >= min_balance]
        return HolderPage(
            chain_id=key.chain_id,
            token_address=key.token_address,
            block_number=snapshot.block_number,
            generated_at=snapshot.generated_at,
            limit=limit,
            offset=offset,
            holders=tuple(eligible[offset : offset + limit]),
        )
