"""Protocol subgraph (ledger) client."""

from supertoken_holders.clients.subgraph.schema import AccountTokenSnapshotSchema
from supertoken_holders.clients.subgraph.subgraph_client import SubgraphClient

__all__ = ["AccountTokenSnapshotSchema", "SubgraphClient"]
