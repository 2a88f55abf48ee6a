"""Reconciliation planning: which accounts can be served from the ledger as-is.

An account is trusted when nothing can have moved its balance since the ledger
last saw it: no net flow, no pool memberships (connected or not), and a ledger
update at or below the chain head. Everything else is verified on-chain.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import structlog

from supertoken_holders.models.ledger_record import LedgerRecord
from supertoken_holders.services.projection import ProjectedBalance, project


class AccountClass(str, Enum):
    TRUSTED = "trusted"
    NEEDS_VERIFICATION = "needs_verification"


def classify(record: LedgerRecord, chain_head_block: int) -> AccountClass:
    """Return TRUSTED iff the record has no accrual source and is not ahead of the head."""
    if (
        record.net_flow_rate == 0
        and not record.has_pool_memberships
        and record.last_update_block <= chain_head_block
    ):
        return AccountClass.TRUSTED
    return AccountClass.NEEDS_VERIFICATION


@dataclass(frozen=True, slots=True)
class ReconciliationPlan:
    """Projection of every account plus the trusted / needs-verification split."""

    chain_head_block: int
    reference_timestamp: int
    projections: dict[str, ProjectedBalance] = field(default_factory=dict)
    trusted: frozenset[str] = frozenset()
    needs_verification: tuple[str, ...] = ()

    def is_trusted(self, account: str) -> bool:
        return account in self.trusted


class ReconciliationPlanner:
    """Builds a ReconciliationPlan for one run."""

    def __init__(
        self,
        *,
        verify_all: bool = False,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the planner.

        Args:
            verify_all: Classify every account as needing verification.
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._verify_all = verify_all
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def plan(
        self,
        records: Iterable[LedgerRecord],
        chain_head_block: int,
        reference_timestamp: int,
    ) -> ReconciliationPlan:
        """Project and classify each account. Duplicate accounts keep their first record."""
        projections: dict[str, ProjectedBalance] = {}
        trusted: set[str] = set()
        needs_verification: list[str] = []
        clamped = 0
        with_flow = 0
        with_pools = 0

        for record in records:
            account = record.account
            if account in projections:
                continue
            projected = project(record, reference_timestamp)
            projections[account] = projected
            if projected.clamped:
                clamped += 1
            if record.net_flow_rate != 0:
                with_flow += 1
            if record.has_pool_memberships:
                with_pools += 1

            if not self._verify_all and classify(record, chain_head_block) is AccountClass.TRUSTED:
                trusted.add(account)
            else:
                needs_verification.append(account)

        self._logger.info(
            "reconciliation_planned",
            accounts_count=len(projections),
            accounts_with_flow=with_flow,
            accounts_with_pools=with_pools,
            trusted_count=len(trusted),
            needs_verification_count=len(needs_verification),
            clamped_delta_t_count=clamped,
            chain_head_block=chain_head_block,
        )
        return ReconciliationPlan(
            chain_head_block=chain_head_block,
            reference_timestamp=reference_timestamp,
            projections=projections,
            trusted=frozenset(trusted),
            needs_verification=tuple(needs_verification),
        )
