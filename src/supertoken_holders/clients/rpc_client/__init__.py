"""EVM JSON-RPC client."""

from supertoken_holders.clients.rpc_client.rpc_client import SELECTOR_BALANCE_OF, RpcClient

__all__ = ["RpcClient", "SELECTOR_BALANCE_OF"]
