"""Subgraph response schemas (protocol-v1 AccountTokenSnapshot alignment).

Amounts arrive as base-10 integer strings; they are validated into Python ints
at this boundary so nothing untyped travels further in.
"""

from __future__ import annotations

from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from supertoken_holders.models.ledger_record import LedgerRecord, PoolMembership
from supertoken_holders.utils.validation import normalize_address, parse_int_amount


def _int_string(value: Any) -> int:
    return parse_int_amount(value)


IntString = Annotated[int, BeforeValidator(_int_string)]


class _Schema(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class PoolSchema(_Schema):
    id: str
    perUnitFlowRate: IntString = 0


class PoolMembershipSchema(_Schema):
    id: str
    units: IntString = 0
    isConnected: bool = False
    pool: PoolSchema

    def to_membership(self) -> PoolMembership:
        return PoolMembership(
            pool_id=self.pool.id.lower(),
            per_unit_flow_rate=self.pool.perUnitFlowRate,
            units_held=self.units,
            connected=self.isConnected,
        )


class AccountSchema(_Schema):
    id: str
    poolMemberships: list[PoolMembershipSchema] = Field(default_factory=list)


class AccountTokenSnapshotSchema(_Schema):
    """accountTokenSnapshots item. Keys match the subgraph response (camelCase)."""

    id: str
    totalNetFlowRate: IntString
    balanceUntilUpdatedAt: IntString
    updatedAtTimestamp: IntString
    updatedAtBlockNumber: IntString
    account: AccountSchema

    def to_ledger_record(self) -> LedgerRecord:
        return LedgerRecord(
            id=self.id,
            account=normalize_address(self.account.id),
            ledger_balance=self.balanceUntilUpdatedAt,
            net_flow_rate=self.totalNetFlowRate,
            last_update_timestamp=self.updatedAtTimestamp,
            last_update_block=self.updatedAtBlockNumber,
            pool_memberships=tuple(m.to_membership() for m in self.account.poolMemberships),
        )


class GraphQLResponseSchema(_Schema):
    """Envelope of a GraphQL response: data and/or a list of errors."""

    data: Optional[dict[str, Any]] = None
    errors: Optional[list[Any]] = None
