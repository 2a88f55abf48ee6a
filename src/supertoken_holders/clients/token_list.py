# -*- coding: utf-8 -*-
"""Super token list client with a TTL cache and stale fallback."""

from __future__ import annotations

import structlog
from typing import TYPE_CHECKING, Any, Callable, Optional
from cachetools import TTLCache
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from supertoken_holders.config import Settings
from supertoken_holders.exceptions import HolderSnapshotError, HttpRequestError

if TYPE_CHECKING:
    from supertoken_holders.clients.http import AsyncHttpClient

_CACHE_KEY = "tokens"


class TokenInfoSchema(BaseModel):
    """Token list entry. Keys match the token list JSON (camelCase)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    chainId: int
    address: str
    symbol: str
    tags: list[str] = Field(default_factory=list)


class TokenListSchema(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    tokens: list[TokenInfoSchema]


class TokenListClient:
    """Fetches the token list; caches it for cache_ttl_seconds.

    A failed refresh falls back to the last good list (stale) when there is one.
    """

    def __init__(
        self,
        http_client: "AsyncHttpClient",
        settings: Settings,
        *,
        timer: Optional[Callable[[], float]] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            http_client: Async HTTP client (injected).
            settings: Application settings (uses settings.token_list).
            timer: Optional clock for the TTL cache (tests).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._http = http_client
        self._settings = settings
        ttl = settings.token_list.cache_ttl_seconds
        self._cache: TTLCache[str, list[TokenInfoSchema]] = (
            TTLCache(maxsize=1, ttl=ttl, timer=timer) if timer is not None else TTLCache(maxsize=1, ttl=ttl)
        )
        self._last_good: list[TokenInfoSchema] | None = None
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def get_tokens(self) -> list[TokenInfoSchema]:
        """Return all token list entries (cached).

        Raises:
            HolderSnapshotError: If the list cannot be fetched and nothing was cached before.
        """
        cached = self._cache.get(_CACHE_KEY)
        if cached is not None:
            return cached
        try:
            raw = await self._http.get(self._settings.token_list.url)
            tokens = TokenListSchema.model_validate(raw).tokens
        except (HttpRequestError, ValidationError) as e:
            if self._last_good is not None:
                self._logger.warning(
                    "token_list_stale_fallback",
                    error_type=type(e).__name__,
                    error_message=str(e),
                    token_list_size=len(self._last_good),
                )
                return self._last_good
            raise HolderSnapshotError(f"Failed to fetch token list: {e}") from e

        self._cache[_CACHE_KEY] = tokens
        self._last_good = tokens
        self._logger.info("token_list_fetched", token_list_size=len(tokens))
        return tokens
