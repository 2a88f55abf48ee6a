"""Live balance of one account: balanceOf at the chain head plus ledger flow rate."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Optional

import structlog

from supertoken_holders.clients.rpc_client import RpcClient
from supertoken_holders.clients.subgraph import SubgraphClient
from supertoken_holders.config import Settings
from supertoken_holders.exceptions import InvalidQueryError
from supertoken_holders.services.projection import effective_net_flow_rate
from supertoken_holders.services.tokens import TokenRegistry
from supertoken_holders.utils.validation import is_hex_address, mask_address, normalize_address


@dataclass(frozen=True, slots=True)
class AccountBalance:
    """Balance of one account at block_number. Amounts are integers in the smallest unit."""

    account: str
    chain_id: int
    token_address: str
    token_symbol: str
    block_number: int
    balance: int
    net_flow_rate: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "account": self.account,
            "tokenAddress": self.token_address,
            "tokenSymbol": self.token_symbol,
            "chainId": self.chain_id,
            "blockNumber": self.block_number,
            "balance": str(self.balance),
            "netFlowRate": str(self.net_flow_rate),
        }


class AccountBalanceService:
    """Reads one account's balance directly from the chain (not from snapshots)."""

    def __init__(
        self,
        rpc_client: RpcClient,
        subgraph_client: SubgraphClient,
        settings: Settings,
        registry: Optional[TokenRegistry] = None,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        self._rpc = rpc_client
        self._subgraph = subgraph_client
        self._settings = settings
        self._registry = registry
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def get_account_balance(self, chain_id: int, account: str, token: str) -> AccountBalance:
        """Read balanceOf(account) pinned at the current head, with the ledger's net flow rate.

        The net flow rate is zero when the ledger has no record for the account.

        Raises:
            InvalidQueryError: If the account, chain or token is invalid.
            RpcError: If the head or balance cannot be read.
            LedgerQueryError: If the ledger lookup fails.
        """
        if not is_hex_address(account):
            raise InvalidQueryError("Invalid account address format")
        network = self._settings.networks.network_by_chain_id(chain_id)
        if network is None:
            raise InvalidQueryError(f"Unsupported chainId: {chain_id}")
        if self._registry is not None:
            resolved = self._registry.resolve(chain_id, token)
            token_address, token_symbol = resolved.address, resolved.symbol
        else:
            token_address, token_symbol = normalize_address(token), ""
        account_norm = normalize_address(account)

        block_number = await self._rpc.get_block_number(network.name)
        balance = await self._rpc.get_erc20_balance_raw(
            network.name, token_address, account_norm, block=block_number
        )
        record = await self._subgraph.get_account_token_snapshot(
            network.name, token_address, account_norm
        )
        net_flow_rate = effective_net_flow_rate(record) if record is not None else 0

        self._logger.info(
            "account_balance_read",
            chain_id=chain_id,
            token_address=token_address,
            account_masked=mask_address(account_norm),
            block_number=block_number,
            has_ledger_record=record is not None,
        )
        return AccountBalance(
            account=account_norm,
            chain_id=chain_id,
            token_address=token_address,
            token_symbol=token_symbol,
            block_number=block_number,
            balance=balance,
            net_flow_rate=net_flow_rate,
        )
