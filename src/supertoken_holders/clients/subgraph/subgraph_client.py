# -*- coding: utf-8 -*-
"""Protocol subgraph client (GraphQL over HTTP POST)."""

from __future__ import annotations

import structlog
from typing import TYPE_CHECKING, Any, Callable, Optional, cast
from pydantic import ValidationError
from structlog.contextvars import bound_contextvars

from supertoken_holders.clients.subgraph.schema import (
    AccountTokenSnapshotSchema,
    GraphQLResponseSchema,
)
from supertoken_holders.config import Settings
from supertoken_holders.exceptions import HttpRequestError, LedgerQueryError
from supertoken_holders.models.ledger_record import LedgerRecord
from supertoken_holders.utils.validation import mask_address, normalize_address

if TYPE_CHECKING:
    from supertoken_holders.clients.http import AsyncHttpClient

_SNAPSHOT_FIELDS = """
    id
    totalNetFlowRate
    balanceUntilUpdatedAt
    updatedAtTimestamp
    updatedAtBlockNumber
    account {
      id
      poolMemberships(first: $poolLimit, where: {pool_: {token: $token}}) {
        id
        units
        isConnected
        pool {
          id
          perUnitFlowRate
        }
      }
    }
"""

ACCOUNT_TOKEN_SNAPSHOTS_PAGE_QUERY = (
    """
query AccountTokenSnapshotsPage($token: String!, $lastId: ID!, $first: Int!, $poolLimit: Int!) {
  accountTokenSnapshots(
    first: $first
    where: {token: $token, id_gt: $lastId}
    orderBy: id
    orderDirection: asc
  ) {"""
    + _SNAPSHOT_FIELDS
    + """  }
}
"""
)

ACCOUNT_TOKEN_SNAPSHOT_QUERY = (
    """
query AccountTokenSnapshot($id: ID!, $token: String!, $poolLimit: Int!) {
  accountTokenSnapshot(id: $id) {"""
    + _SNAPSHOT_FIELDS
    + """  }
}
"""
)


class SubgraphClient:
    """Client for the protocol subgraph (accountTokenSnapshots)."""

    def __init__(
        self,
        http_client: "AsyncHttpClient",
        settings: Settings,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            http_client: Async HTTP client (e.g. AsyncHttpClient).
            settings: Application settings (uses settings.networks.subgraph_url_template
                and settings.snapshot.pool_memberships_limit).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._http = http_client
        self._settings = settings
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def _url(self, network: str) -> str:
        return self._settings.networks.subgraph_url(network)

    async def query(
        self,
        network: str,
        query: str,
        variables: dict[str, Any],
        *,
        cursor: str | None = None,
    ) -> dict[str, Any]:
        """Run a GraphQL query and return its `data` object.

        Raises:
            LedgerQueryError: On transport failure, a malformed envelope, or a
                non-empty `errors` list (partial results are never used).
        """
        try:
            raw = await self._http.post(
                self._url(network),
                json={"query": query, "variables": variables},
            )
        except HttpRequestError as e:
            raise LedgerQueryError(
                f"Subgraph request failed for {network}: {e}",
                network=network,
                cursor=cursor,
            ) from e
        if not isinstance(raw, dict):
            raise LedgerQueryError(
                f"Unexpected subgraph response type: {type(raw).__name__}",
                network=network,
                cursor=cursor,
            )
        try:
            envelope = GraphQLResponseSchema.model_validate(raw)
        except ValidationError as e:
            raise LedgerQueryError(
                f"Malformed subgraph response: {e}", network=network, cursor=cursor
            ) from e
        if envelope.errors:
            self._logger.error(
                "subgraph_query_errors",
                network=network,
                subgraph_cursor=cursor,
                subgraph_errors=envelope.errors,
            )
            raise LedgerQueryError(
                f"Subgraph reported {len(envelope.errors)} error(s)",
                network=network,
                cursor=cursor,
                errors=envelope.errors,
            )
        if envelope.data is None:
            raise LedgerQueryError("Subgraph response has no data", network=network, cursor=cursor)
        return envelope.data

    async def get_account_token_snapshots_page(
        self,
        network: str,
        token_address: str,
        *,
        last_id: str = "",
        first: int = 1000,
    ) -> list[LedgerRecord]:
        """Fetch one page of account token snapshots with id > last_id, ordered by id ascending.

        Args:
            network: Network name (e.g. base-mainnet).
            token_address: Super token address (0x...).
            last_id: Cursor (id of the last record of the previous page; "" for the first page).
            first: Page size.

        Returns:
            Validated ledger records, in id order.

        Raises:
            LedgerQueryError: If the page cannot be fetched or any record is malformed.
        """
        token = normalize_address(token_address)
        with bound_contextvars(subgraph_network=network, subgraph_cursor=last_id, subgraph_first=first):
            data = await self.query(
                network,
                ACCOUNT_TOKEN_SNAPSHOTS_PAGE_QUERY,
                {
                    "token": token,
                    "lastId": last_id,
                    "first": first,
                    "poolLimit": self._settings.snapshot.pool_memberships_limit,
                },
                cursor=last_id,
            )
            items = data.get("accountTokenSnapshots")
            if items is None:
                items = []
            if not isinstance(items, list):
                raise LedgerQueryError(
                    "accountTokenSnapshots is not a list", network=network, cursor=last_id
                )
            return [self._parse(network, item, cursor=last_id) for item in cast(list[Any], items)]

    async def get_account_token_snapshot(
        self,
        network: str,
        token_address: str,
        account: str,
    ) -> LedgerRecord | None:
        """Fetch the ledger record of one account for one token, or None if the ledger has none."""
        token = normalize_address(token_address)
        account_norm = normalize_address(account)
        with bound_contextvars(
            subgraph_network=network,
            subgraph_account_masked=mask_address(account_norm),
        ):
            data = await self.query(
                network,
                ACCOUNT_TOKEN_SNAPSHOT_QUERY,
                {
                    "id": f"{account_norm}-{token}",
                    "token": token,
                    "poolLimit": self._settings.snapshot.pool_memberships_limit,
                },
            )
            item = data.get("accountTokenSnapshot")
            if item is None:
                return None
            return self._parse(network, item)

    def _parse(self, network: str, item: Any, *, cursor: str | None = None) -> LedgerRecord:
        try:
            return AccountTokenSnapshotSchema.model_validate(item).to_ledger_record()
        except ValidationError as e:
            item_id = item.get("id") if isinstance(item, dict) else None
            self._logger.error(
                "subgraph_record_invalid",
                network=network,
                subgraph_record_id=item_id,
                error_message=str(e),
            )
            raise LedgerQueryError(
                f"Malformed ledger record {item_id!r}", network=network, cursor=cursor
            ) from e
