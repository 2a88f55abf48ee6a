"""Published holder snapshots, keyed by (chain_id, token_address)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class SnapshotKey:
    """Composite key of a snapshot: chain id and lowercased token address."""

    chain_id: int
    token_address: str

    @classmethod
    def of(cls, chain_id: int, token_address: str) -> SnapshotKey:
        return cls(chain_id=int(chain_id), token_address=token_address.strip().lower())


@dataclass(frozen=True, slots=True)
class HolderRecord:
    """One holder in a published snapshot. Amounts are integers in the token's smallest unit."""

    address: str
    balance: int
    net_flow_rate: int
    claimable_balance: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize with integer strings (camelCase keys, as served and persisted)."""
        out: dict[str, Any] = {
            "address": self.address,
            "balance": str(self.balance),
            "netFlowRate": str(self.net_flow_rate),
        }
        if self.claimable_balance is not None:
            out["claimableBalance"] = str(self.claimable_balance)
        return out


def holder_sort_key(holder: HolderRecord) -> tuple[int, str]:
    """Sort key: balance descending, then address ascending."""
    return (-holder.balance, holder.address)


@dataclass(frozen=True, slots=True)
class TokenSnapshot:
    """Complete, sorted, zero-filtered holder list tied to one block height.

    Created wholesale by one pipeline run and never mutated; replaced by the
    next successful run.
    """

    chain_id: int
    token_address: str
    block_number: int
    generated_at: datetime
    holders: tuple[HolderRecord, ...]

    @property
    def key(self) -> SnapshotKey:
        return SnapshotKey.of(self.chain_id, self.token_address)


@dataclass(frozen=True, slots=True)
class HolderPage:
    """A page of holders returned by the read API."""

    chain_id: int
    token_address: str
    block_number: int
    generated_at: datetime | None
    limit: int
    offset: int
    holders: tuple[HolderRecord, ...]
    token_symbol: str = ""

    @property
    def total(self) -> int:
        return len(self.holders)

    def to_dict(self) -> dict[str, Any]:
        return {
            "chainId": self.chain_id,
            "tokenAddress": self.token_address,
            "tokenSymbol": self.token_symbol,
            "blockNumber": self.block_number,
            "generatedAt": self.generated_at.isoformat() if self.generated_at else None,
            "limit": self.limit,
            "offset": self.offset,
            "total": self.total,
            "holders": [h.to_dict() for h in self.holders],
        }
