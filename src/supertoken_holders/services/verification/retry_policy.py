"""Retry policy for per-account balance reads."""

from __future__ import annotations

from dataclasses import dataclass

from supertoken_holders.config import SnapshotSettings


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Exponential backoff: delay before attempt n+1 is base_delay * multiplier**(n-1)."""

    max_attempts: int = 3
    base_delay_seconds: float = 1.0
    multiplier: float = 2.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.base_delay_seconds < 0:
            raise ValueError("base_delay_seconds must be >= 0")
        if self.multiplier < 1:
            raise ValueError("multiplier must be >= 1")

    def delay_after(self, attempt: int) -> float:
        """Seconds to wait after failed attempt number `attempt` (1-based)."""
        return self.base_delay_seconds * (self.multiplier ** max(0, attempt - 1))

    @classmethod
    def from_settings(cls, snapshot: SnapshotSettings) -> RetryPolicy:
        return cls(
            max_attempts=snapshot.rpc_max_attempts,
            base_delay_seconds=snapshot.rpc_base_delay_seconds,
            multiplier=snapshot.rpc_backoff_multiplier,
        )
