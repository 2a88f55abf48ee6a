"""EVM JSON-RPC client for on-chain reads (eth_blockNumber, eth_call balanceOf at a block)."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, cast

import structlog

from supertoken_holders.exceptions import HttpRequestError, RpcError
from supertoken_holders.utils.validation import mask_address

if TYPE_CHECKING:
    from supertoken_holders.clients.http import AsyncHttpClient
    from supertoken_holders.config import Settings

# ERC-20 selector: bytes4(keccak256("balanceOf(address)"))
SELECTOR_BALANCE_OF = "0x70a08231"


def _address_word(addr: str) -> str:
    """Return the address as a 32-byte ABI word (hex, no 0x prefix)."""
    s = (addr or "").strip().lower()
    if s.startswith("0x"):
        s = s[2:]
    if len(s) != 40:
        raise ValueError(f"Invalid address length: {addr!r}")
    return "0" * 24 + s


def _parse_quantity(raw: Any, method: str) -> int:
    if not isinstance(raw, str) or not raw.startswith("0x"):
        raise RpcError(f"Unexpected {method} result: {raw!r}", method=method)
    if raw == "0x":
        return 0
    try:
        return int(raw, 16)
    except ValueError as e:
        raise RpcError(f"Unexpected {method} result: {raw!r}", method=method) from e


class RpcClient:
    """Client for EVM JSON-RPC endpoints, one URL per configured network."""

    def __init__(
        self,
        http_client: AsyncHttpClient,
        settings: Settings,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the RPC client.

        Args:
            http_client: HTTP client for POST requests (JSON-RPC).
            settings: Configuration (uses settings.networks.rpc_url_template).
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._http = http_client
        self._settings = settings
        self._logger = get_logger(logger_name or self.__class__.__name__)
        self._request_id = 0

    def _rpc_url(self, network: str) -> str:
        return self._settings.networks.rpc_url(network).rstrip("/")

    async def call(self, network: str, method: str, params: list[Any]) -> Any:
        """Perform one JSON-RPC request and return its `result`.

        Raises:
            RpcError: If the transport fails or the response carries an error object.
        """
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params,
        }
        try:
            response = await self._http.post(self._rpc_url(network), json=payload)
        except HttpRequestError as e:
            raise RpcError(f"RPC transport error: {e}", method=method) from e
        if not isinstance(response, dict):
            raise RpcError(f"Unexpected RPC response type: {type(response)}", method=method)
        resp_dict = cast(dict[str, Any], response)
        if "error" in resp_dict and resp_dict["error"] is not None:
            err = resp_dict["error"]
            code: int | None = None
            if isinstance(err, dict):
                err_d = cast(dict[str, Any], err)
                msg = str(err_d.get("message", err_d))
                code = err_d.get("code") if isinstance(err_d.get("code"), int) else None
            else:
                msg = str(err)
            raise RpcError(f"RPC error: {msg}", method=method, code=code)
        if "result" not in resp_dict:
            raise RpcError("RPC response has no result", method=method)
        return resp_dict["result"]

    async def get_block_number(self, network: str) -> int:
        """Return the current chain head height."""
        result = await self.call(network, "eth_blockNumber", [])
        return _parse_quantity(result, "eth_blockNumber")

    async def eth_call(self, network: str, to: str, data: str, block: int | str = "latest") -> str:
        """Perform eth_call (read-only contract call) at a block number or tag.

        Args:
            network: Network name.
            to: Contract address (0x...).
            data: Hex-encoded calldata (with 0x prefix).
            block: Block height (int) or tag (e.g. "latest").

        Returns:
            Hex-encoded result (e.g. "0x...").
        """
        to_norm = to.strip()
        if not to_norm.startswith("0x"):
            to_norm = "0x" + to_norm
        block_param = hex(block) if isinstance(block, int) else block
        result = await self.call(network, "eth_call", [{"to": to_norm, "data": data}, block_param])
        return str(result) if result is not None else "0x0"

    async def get_erc20_balance_raw(
        self,
        network: str,
        token_address: str,
        owner_address: str,
        *,
        block: int | str = "latest",
    ) -> int:
        """Get raw (unscaled) ERC-20 balance of owner at a block.

        Returns:
            Balance in the token's smallest unit.
        """
        data = SELECTOR_BALANCE_OF + _address_word(owner_address)
        raw = await self.eth_call(network, token_address, data, block)
        balance = _parse_quantity(raw, "eth_call")
        self._logger.debug(
            "rpc_balance_read",
            network=network,
            owner_masked=mask_address(owner_address),
            block=block,
        )
        return balance
