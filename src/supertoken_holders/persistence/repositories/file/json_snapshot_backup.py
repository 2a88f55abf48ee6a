# -*- coding: utf-8 -*-
"""JSON file snapshot backup: <data_dir>/<chain_id>_<token_address>.json."""

from __future__ import annotations

import asyncio
import os
import structlog
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError, field_serializer

from supertoken_holders.models.token_snapshot import HolderRecord, SnapshotKey, TokenSnapshot
from supertoken_holders.persistence.repositories.interfaces.snapshot_backup import ISnapshotBackup
from supertoken_holders.utils.validation import parse_int_amount

IntString = Annotated[int, BeforeValidator(parse_int_amount)]


class HolderFileSchema(BaseModel):
    """Holder entry as persisted (camelCase, integer strings)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    address: str
    balance: IntString
    netFlowRate: IntString = 0
    claimableBalance: Optional[IntString] = None

    @field_serializer("balance", "netFlowRate")
    def _int_to_str(self, value: int) -> str:
        return str(value)

    @field_serializer("claimableBalance")
    def _optional_int_to_str(self, value: Optional[int]) -> Optional[str]:
        return None if value is None else str(value)


class SnapshotFileSchema(BaseModel):
    """Durable snapshot record: {updatedAt (epoch ms), blockNumber, holders}."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    updatedAt: int
    blockNumber: int
    holders: list[HolderFileSchema] = Field(default_factory=list)

    @classmethod
    def from_snapshot(cls, snapshot: TokenSnapshot) -> SnapshotFileSchema:
        return cls(
            updatedAt=int(snapshot.generated_at.timestamp() * 1000),
            blockNumber=snapshot.block_number,
            holders=[
                HolderFileSchema(
                    address=h.address,
                    balance=h.balance,
                    netFlowRate=h.net_flow_rate,
                    claimableBalance=h.claimable_balance,
                )
                for h in snapshot.holders
            ],
        )

    def to_snapshot(self, key: SnapshotKey) -> TokenSnapshot:
        return TokenSnapshot(
            chain_id=key.chain_id,
            token_address=key.token_address,
            block_number=self.blockNumber,
            generated_at=datetime.fromtimestamp(self.updatedAt / 1000, tz=UTC),
            holders=tuple(
                HolderRecord(
                    address=h.address.lower(),
                    balance=h.balance,
                    net_flow_rate=h.netFlowRate,
                    claimable_balance=h.claimableBalance,
                )
                for h in self.holders
            ),
        )


class JsonFileSnapshotBackup(ISnapshotBackup):
    """One JSON file per key, written atomically (temp file + os.replace)."""

    def __init__(
        self,
        data_dir: str | Path,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._data_dir = Path(data_dir)
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def path_for(self, key: SnapshotKey) -> Path:
        return self._data_dir / f"{key.chain_id}_{key.token_address}.json"

    async def save(self, snapshot: TokenSnapshot) -> None:
        """Write the snapshot file; raises OSError if the write fails."""
        payload = SnapshotFileSchema.from_snapshot(snapshot).model_dump_json(
            indent=2, exclude_none=True
        )
        path = self.path_for(snapshot.key)
        await asyncio.to_thread(self._write_atomic, path, payload)
        self._logger.debug(
            "snapshot_backup_saved",
            path=str(path),
            holders_count=len(snapshot.holders),
        )

    async def load(self, key: SnapshotKey) -> TokenSnapshot | None:
        path = self.path_for(key)
        try:
            raw = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            self._logger.error("snapshot_backup_read_error", path=str(path), error_message=str(e))
            return None
        try:
            return SnapshotFileSchema.model_validate_json(raw).to_snapshot(key)
        except ValidationError as e:
            self._logger.error("snapshot_backup_invalid", path=str(path), error_message=str(e))
            return None

    def _write_atomic(self, path: Path, payload: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        os.replace(tmp_path, path)
