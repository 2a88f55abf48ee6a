"""Custom exceptions for the holder snapshot service."""

from __future__ import annotations


class HolderSnapshotError(Exception):
    """Base exception for holder-snapshot errors."""

    pass


class MissingRequiredConfigError(HolderSnapshotError):
    """Raised when a required configuration value is missing."""

    pass


class HttpRequestError(HolderSnapshotError):
    """Raised when an HTTP request fails after retries."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.cause = cause


class LedgerQueryError(HolderSnapshotError):
    """Raised when a ledger (subgraph) page cannot be fetched, parsed or reports errors."""

    def __init__(
        self,
        message: str,
        *,
        network: str | None = None,
        cursor: str | None = None,
        errors: list[object] | None = None,
    ) -> None:
        super().__init__(message)
        self.network = network
        self.cursor = cursor
        self.errors = errors or []


class RpcError(HolderSnapshotError):
    """Raised when a JSON-RPC call returns an error object or an unusable result."""

    def __init__(
        self,
        message: str,
        *,
        method: str | None = None,
        code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.code = code


class ChainHeadError(HolderSnapshotError):
    """Raised when the chain head cannot be read; no block pin means no verification."""

    pass


class InvalidQueryError(HolderSnapshotError, ValueError):
    """Raised when read-API parameters are malformed (e.g. non-integer minimum balance)."""

    pass
