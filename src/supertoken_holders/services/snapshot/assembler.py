"""SnapshotAssembler: merges verified and ledger-trusted balances into a TokenSnapshot."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import structlog

from supertoken_holders.models.ledger_record import LedgerRecord
from supertoken_holders.models.token_snapshot import HolderRecord, TokenSnapshot, holder_sort_key
from supertoken_holders.services.projection import effective_net_flow_rate
from supertoken_holders.services.reconciliation import ReconciliationPlan
from supertoken_holders.utils.validation import mask_address

# Unresolved accounts logged individually up to this many per run.
_MAX_LOGGED_UNRESOLVED = 20


@dataclass(frozen=True, slots=True)
class AssemblyResult:
    snapshot: TokenSnapshot
    unresolved_accounts: tuple[str, ...]
    zero_balance_count: int


class SnapshotAssembler:
    """Picks one balance per account, drops zeros and unresolved accounts, sorts."""

    def __init__(
        self,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def assemble(
        self,
        *,
        chain_id: int,
        token_address: str,
        records: Sequence[LedgerRecord],
        plan: ReconciliationPlan,
        verified_balances: Mapping[str, int],
        block_number: int,
        generated_at: datetime,
    ) -> AssemblyResult:
        """Build the snapshot.

        Per account: the verified balance if present; otherwise the projected
        balance when the account is trusted; otherwise the account is unresolved
        and left out. Claimable balance comes from the projection's disconnected
        pool accrual and is attached only when positive.
        """
        holders: list[HolderRecord] = []
        unresolved: list[str] = []
        seen: set[str] = set()
        zero_count = 0

        for record in records:
            account = record.account
            if account in seen:
                continue
            seen.add(account)

            projected = plan.projections.get(account)
            if account in verified_balances:
                balance = verified_balances[account]
            elif plan.is_trusted(account) and projected is not None:
                balance = projected.balance
            else:
                unresolved.append(account)
                continue

            if balance <= 0:
                zero_count += 1
                continue

            claimable = projected.claimable_balance if projected is not None else 0
            holders.append(
                HolderRecord(
                    address=account,
                    balance=balance,
                    net_flow_rate=effective_net_flow_rate(record),
                    claimable_balance=claimable if claimable > 0 else None,
                )
            )

        holders.sort(key=holder_sort_key)

        for account in unresolved[:_MAX_LOGGED_UNRESOLVED]:
            self._logger.warning(
                "snapshot_account_unresolved",
                chain_id=chain_id,
                token_address=token_address,
                account_masked=mask_address(account),
            )
        self._logger.info(
            "snapshot_assembled",
            chain_id=chain_id,
            token_address=token_address,
            block_number=block_number,
            holders_count=len(holders),
            zero_balance_removed=zero_count,
            unresolved_count=len(unresolved),
        )

        snapshot = TokenSnapshot(
            chain_id=chain_id,
            token_address=token_address.lower(),
            block_number=block_number,
            generated_at=generated_at,
            holders=tuple(holders),
        )
        return AssemblyResult(
            snapshot=snapshot,
            unresolved_accounts=tuple(unresolved),
            zero_balance_count=zero_count,
        )
