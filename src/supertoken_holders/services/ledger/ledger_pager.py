"""Ledger pagination: every account token snapshot of a token, ascending by id."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from supertoken_holders.clients.subgraph import SubgraphClient
    from supertoken_holders.models.ledger_record import LedgerRecord


class LedgerPager:
    """Pages through the ledger with an id cursor (id_gt last id, ordered by id asc).

    A page shorter than page_size ends the sequence. Any page failure raises
    LedgerQueryError out of the iterator; callers discard what they accumulated.
    """

    DEFAULT_PAGE_SIZE = 1000

    def __init__(
        self,
        subgraph_client: SubgraphClient,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the pager.

        Args:
            subgraph_client: Ledger client (injected).
            page_size: Records per page request (the subgraph maximum is 1000).
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._subgraph = subgraph_client
        self._page_size = max(1, page_size)
        self._logger = get_logger(logger_name or self.__class__.__name__)

    @property
    def page_size(self) -> int:
        return self._page_size

    async def iter_records(self, network: str, token_address: str) -> AsyncIterator[LedgerRecord]:
        """Yield ledger records for the token, one page request at a time."""
        last_id = ""
        page = 0
        while True:
            chunk = await self._subgraph.get_account_token_snapshots_page(
                network,
                token_address,
                last_id=last_id,
                first=self._page_size,
            )
            page += 1
            self._logger.debug(
                "ledger_page_fetched",
                page=page,
                chunk_size=len(chunk),
                cursor=last_id,
            )
            for record in chunk:
                yield record
            if len(chunk) < self._page_size:
                return
            last_id = chunk[-1].id

    async def fetch_all(self, network: str, token_address: str) -> list[LedgerRecord]:
        """Collect every record. Raises LedgerQueryError if any page fails."""
        records = [r async for r in self.iter_records(network, token_address)]
        self._logger.info(
            "ledger_pagination_completed",
            network=network,
            token_address=token_address,
            records_count=len(records),
        )
        return records
