"""Read API over published snapshots: holder pages, supported chains and tokens."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from typing import Any, Optional

import structlog

from supertoken_holders.models.token_snapshot import HolderPage
from supertoken_holders.persistence import SnapshotStore
from supertoken_holders.persistence.snapshot_store import DEFAULT_PAGE_LIMIT
from supertoken_holders.services.tokens import RegisteredToken, TokenRegistry


class HolderQueryService:
    """Serves holder pages from the SnapshotStore. Never triggers a pipeline run."""

    def __init__(
        self,
        store: SnapshotStore,
        registry: Optional[TokenRegistry] = None,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            store: Published snapshot store (injected).
            registry: Optional; when set, tokens are resolved (address or symbol)
                and unknown tokens or chains raise InvalidQueryError.
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._store = store
        self._registry = registry
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def resolve_token(self, chain_id: int, token: str) -> tuple[str, str]:
        """Return (lowercased token address, symbol) for an address or symbol.

        The symbol is empty when there is no registry.

        Raises:
            InvalidQueryError: If a registry is set and the token is not recognized.
        """
        if self._registry is not None:
            resolved = self._registry.resolve(chain_id, token)
            return resolved.address, resolved.symbol
        return token.strip().lower(), ""

    def list_holders(
        self,
        chain_id: int,
        token: str,
        limit: int = DEFAULT_PAGE_LIMIT,
        offset: int = 0,
        min_balance_wei: str | int = "1",
    ) -> HolderPage:
        """Return one page of the latest published snapshot.

        Raises:
            InvalidQueryError: On unknown chain/token or invalid paging parameters.
        """
        token_address, token_symbol = self.resolve_token(chain_id, token)
        page = replace(
            self._store.read(chain_id, token_address, limit, offset, min_balance_wei),
            token_symbol=token_symbol,
        )
        self._logger.debug(
            "holders_page_served",
            chain_id=chain_id,
            token_address=token_address,
            limit=page.limit,
            offset=page.offset,
            returned_count=page.total,
            block_number=page.block_number,
        )
        return page

    def supported_chain_ids(self) -> list[int]:
        if self._registry is None:
            return sorted({k.chain_id for k in self._store.keys()})
        return self._registry.supported_chain_ids()

    def list_tokens(self, chain_id: int | None = None) -> list[RegisteredToken]:
        """Return known tokens, for one chain or all of them. Empty without a registry."""
        if self._registry is None:
            return []
        if chain_id is None:
            return self._registry.all_tokens()
        return self._registry.tokens_for_chain(chain_id)
