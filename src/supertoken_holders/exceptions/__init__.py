"""Exceptions subpackage."""

from supertoken_holders.exceptions.exceptions import (
    ChainHeadError,
    HolderSnapshotError,
    HttpRequestError,
    InvalidQueryError,
    LedgerQueryError,
    MissingRequiredConfigError,
    RpcError,
)

__all__ = [
    "ChainHeadError",
    "HolderSnapshotError",
    "HttpRequestError",
    "InvalidQueryError",
    "LedgerQueryError",
    "MissingRequiredConfigError",
    "RpcError",
]
