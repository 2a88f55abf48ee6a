"""Super token holder snapshots: ledger projection, on-chain verification, published holder lists."""

from supertoken_holders.clients import AsyncHttpClient, RpcClient, SubgraphClient
from supertoken_holders.config import get_settings
from supertoken_holders.DI import Container
from supertoken_holders.services import HolderQueryService, SnapshotPipeline

__version__ = "0.1.0"
__all__ = [
    "AsyncHttpClient",
    "Container",
    "HolderQueryService",
    "RpcClient",
    "SnapshotPipeline",
    "SubgraphClient",
    "get_settings",
]
