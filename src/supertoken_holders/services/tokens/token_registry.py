"""Registry of Super tokens per configured chain (config targets, token list, overrides)."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Optional

import structlog

from supertoken_holders.clients.token_list import TokenListClient
from supertoken_holders.config import Settings, TokenTarget
from supertoken_holders.exceptions import HolderSnapshotError, InvalidQueryError
from supertoken_holders.utils.validation import is_hex_address, normalize_address

SUPERTOKEN_TAG = "supertoken"


@dataclass(frozen=True, slots=True)
class RegisteredToken:
    """A Super token known on one chain. symbol is empty for config-only entries."""

    chain_id: int
    network: str
    address: str
    symbol: str = ""


class TokenRegistry:
    """Resolves token addresses and symbols per chain and lists snapshot targets.

    Sources, in order: SNAPSHOT__TOKENS, the token list (when enabled) filtered
    to tokens tagged "supertoken" on configured chains minus skip_tokens, then
    TOKEN_LIST__OVERRIDES. The first entry for an address wins.
    """

    def __init__(
        self,
        settings: Settings,
        token_list_client: Optional[TokenListClient] = None,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            settings: Application settings (networks, snapshot.tokens, token_list).
            token_list_client: Optional; required only when the token list is enabled.
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._settings = settings
        self._token_list = token_list_client
        self._list_tokens: list[RegisteredToken] = []
        self._logger = get_logger(logger_name or self.__class__.__name__)
        self._tokens: dict[int, list[RegisteredToken]] = self._build(self._list_tokens)

    def _build(self, list_tokens: list[RegisteredToken]) -> dict[int, list[RegisteredToken]]:
        """Merge config targets, token list entries and overrides into a fresh per-chain dict."""
        tokens: dict[int, list[RegisteredToken]] = {n.chain_id: [] for n in self._settings.networks.networks}

        def _add(token: RegisteredToken) -> None:
            chain_tokens = tokens.get(token.chain_id)
            if chain_tokens is None or any(t.address == token.address for t in chain_tokens):
                return
            chain_tokens.append(token)

        for target in self._settings.snapshot.tokens:
            network = self._settings.networks.network_by_name(target.network)
            if network is None:
                self._logger.warning(
                    "token_registry_unknown_network",
                    network=target.network,
                    token_address=target.token_address,
                )
                continue
            _add(RegisteredToken(network.chain_id, network.name, target.token_address))
        for token in list_tokens:
            _add(token)
        for override in self._settings.token_list.overrides:
            network = self._settings.networks.network_by_chain_id(override.chain_id)
            if network is None:
                continue
            _add(
                RegisteredToken(
                    chain_id=override.chain_id,
                    network=network.name,
                    address=normalize_address(override.address),
                    symbol=override.symbol,
                )
            )
        return tokens

    async def _fetch_list_tokens(self) -> list[RegisteredToken]:
        tl = self._settings.token_list
        entries = await self._token_list.get_tokens()  # type: ignore[union-attr]
        list_tokens: list[RegisteredToken] = []
        for entry in entries:
            if SUPERTOKEN_TAG not in entry.tags:
                continue
            if f"{entry.chainId}:{entry.symbol}" in tl.skip_tokens:
                continue
            network = self._settings.networks.network_by_chain_id(entry.chainId)
            if network is None:
                continue
            list_tokens.append(
                RegisteredToken(
                    chain_id=entry.chainId,
                    network=network.name,
                    address=normalize_address(entry.address),
                    symbol=entry.symbol,
                )
            )
        return list_tokens

    async def refresh(self) -> None:
        """Rebuild the registry from config and, when enabled, the token list.

        The registry is swapped in one assignment, so readers never see a partial
        rebuild. When the token list fetch fails, the entries from the last
        successful fetch are kept together with config targets and overrides, and
        the error is re-raised.

        Raises:
            HolderSnapshotError: If the token list is enabled and cannot be fetched
                (and nothing was cached before).
        """
        error: HolderSnapshotError | None = None
        if self._settings.token_list.enabled and self._token_list is not None:
            try:
                self._list_tokens = await self._fetch_list_tokens()
            except HolderSnapshotError as e:
                error = e
        else:
            self._list_tokens = []
        self._tokens = self._build(self._list_tokens)
        self._logger.info(
            "token_registry_refreshed",
            chains_count=len(self._tokens),
            tokens_count=sum(len(t) for t in self._tokens.values()),
            token_list_failed=error is not None,
        )
        if error is not None:
            raise error

    def supported_chain_ids(self) -> list[int]:
        return sorted(self._tokens)

    def tokens_for_chain(self, chain_id: int) -> list[RegisteredToken]:
        return list(self._tokens.get(chain_id, []))

    def all_tokens(self) -> list[RegisteredToken]:
        return [t for chain_id in self.supported_chain_ids() for t in self._tokens[chain_id]]

    def targets(self) -> list[TokenTarget]:
        """Return one snapshot target per registered token."""
        return [TokenTarget(network=t.network, token_address=t.address) for t in self.all_tokens()]

    def resolve(self, chain_id: int, address_or_symbol: str) -> RegisteredToken:
        """Resolve a token address (case-insensitive) or exact symbol on chain_id.

        Raises:
            InvalidQueryError: If the chain is unsupported or the token is unknown on it.
        """
        if chain_id not in self._tokens:
            supported = ", ".join(str(c) for c in self.supported_chain_ids())
            raise InvalidQueryError(f"Unsupported chainId: {chain_id}. Supported chainIds: {supported}")
        value = (address_or_symbol or "").strip()
        if not value:
            raise InvalidQueryError("Token address or symbol is required")
        tokens = self._tokens[chain_id]
        if is_hex_address(value):
            address = value.lower()
            for token in tokens:
                if token.address == address:
                    return token
            raise InvalidQueryError(f"Token {address} is not a recognized SuperToken on chain {chain_id}")
        for token in tokens:
            if token.symbol and token.symbol == value:
                return token
        raise InvalidQueryError(f"Token symbol {value} is not a recognized SuperToken on chain {chain_id}")
