"""HTTP, subgraph, RPC and token list clients."""

from supertoken_holders.clients.http import AsyncHttpClient
from supertoken_holders.clients.rpc_client import RpcClient
from supertoken_holders.clients.subgraph import SubgraphClient
from supertoken_holders.clients.token_list import TokenInfoSchema, TokenListClient

__all__ = [
    "AsyncHttpClient",
    "RpcClient",
    "SubgraphClient",
    "TokenInfoSchema",
    "TokenListClient",
]
