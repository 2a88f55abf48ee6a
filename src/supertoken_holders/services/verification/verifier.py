# -*- coding: utf-8 -*-
"""RpcBalanceVerifier: authoritative balanceOf reads pinned to one block height."""

from __future__ import annotations

import asyncio
import structlog
import time
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

from supertoken_holders.exceptions import ChainHeadError
from supertoken_holders.services.verification.retry_policy import RetryPolicy
from supertoken_holders.utils.validation import mask_address

if TYPE_CHECKING:
    from supertoken_holders.clients.rpc_client import RpcClient


@dataclass(frozen=True, slots=True)
class BatchStats:
    """Timing and retry statistics of one verification call."""

    batch_count: int = 0
    total_time_ms: float = 0.0
    max_batch_time_ms: float = 0.0
    retries_count: int = 0


@dataclass(frozen=True, slots=True)
class VerificationResult:
    """Balances read at block_number, plus accounts that exhausted their retries."""

    block_number: int
    balances: dict[str, int]
    failed_accounts: tuple[str, ...]
    stats: BatchStats


@dataclass(frozen=True, slots=True)
class _AccountRead:
    account: str
    balance: Optional[int]
    retries: int


class RpcBalanceVerifier:
    """Reads balances in batches, concurrently within a batch, with per-account retries.

    One chain head read pins the block for the whole call. A semaphore shared by
    every call on this instance caps in-flight balance reads.
    """

    def __init__(
        self,
        rpc_client: RpcClient,
        *,
        batch_size: int = 100,
        retry_policy: RetryPolicy | None = None,
        max_in_flight: int = 100,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.perf_counter,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the verifier.

        Args:
            rpc_client: JSON-RPC client (injected).
            batch_size: Accounts per batch.
            retry_policy: Per-account retry policy (defaults to 3 attempts, 1s base, x2).
            max_in_flight: Ceiling on concurrent balance reads.
            sleep: Awaitable sleep used for backoff (injected for tests).
            clock: Monotonic clock in seconds used for batch timing.
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._rpc = rpc_client
        self._batch_size = max(1, batch_size)
        self._retry_policy = retry_policy or RetryPolicy()
        self._in_flight = asyncio.Semaphore(max(1, max_in_flight))
        self._sleep = sleep
        self._clock = clock
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def read_chain_head(self, network: str) -> int:
        """Read the current block height.

        Raises:
            ChainHeadError: If the head cannot be read.
        """
        try:
            return await self._rpc.get_block_number(network)
        except Exception as e:
            self._logger.error(
                "chain_head_read_failed",
                network=network,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise ChainHeadError(f"Cannot read chain head for {network}: {e}") from e

    async def verify(
        self,
        network: str,
        token_address: str,
        accounts: Sequence[str],
    ) -> VerificationResult:
        """Read balanceOf for each account at one pinned block.

        Raises:
            ChainHeadError: If the pin cannot be read; no balance reads are issued.
        """
        block_number = await self.read_chain_head(network)

        balances: dict[str, int] = {}
        failed: list[str] = []
        batch_count = 0
        retries = 0
        total_ms = 0.0
        max_batch_ms = 0.0

        unique_accounts = list(dict.fromkeys(accounts))
        for start in range(0, len(unique_accounts), self._batch_size):
            batch = unique_accounts[start : start + self._batch_size]
            t0 = self._clock()
            reads = await asyncio.gather(
                *(self._read_with_retry(network, token_address, a, block_number) for a in batch)
            )
            batch_ms = (self._clock() - t0) * 1000.0
            batch_count += 1
            total_ms += batch_ms
            max_batch_ms = max(max_batch_ms, batch_ms)

            batch_failed = 0
            for read in reads:
                retries += read.retries
                if read.balance is None:
                    failed.append(read.account)
                    batch_failed += 1
                else:
                    balances[read.account] = read.balance

            self._logger.debug(
                "verification_batch_completed",
                network=network,
                batch=batch_count,
                batch_size=len(batch),
                batch_failed=batch_failed,
                batch_time_ms=round(batch_ms, 1),
            )

        stats = BatchStats(
            batch_count=batch_count,
            total_time_ms=total_ms,
            max_batch_time_ms=max_batch_ms,
            retries_count=retries,
        )
        self._logger.info(
            "verification_completed",
            network=network,
            token_address=token_address,
            block_number=block_number,
            verified_count=len(balances),
            failed_count=len(failed),
            batch_count=stats.batch_count,
            total_time_ms=round(stats.total_time_ms, 1),
            max_batch_time_ms=round(stats.max_batch_time_ms, 1),
            retries_count=stats.retries_count,
        )
        return VerificationResult(
            block_number=block_number,
            balances=balances,
            failed_accounts=tuple(failed),
            stats=stats,
        )

    async def _read_with_retry(
        self,
        network: str,
        token_address: str,
        account: str,
        block_number: int,
    ) -> _AccountRead:
        policy = self._retry_policy
        for attempt in range(1, policy.max_attempts + 1):
            try:
                async with self._in_flight:
                    balance = await self._rpc.get_erc20_balance_raw(
                        network, token_address, account, block=block_number
                    )
                return _AccountRead(account=account, balance=balance, retries=attempt - 1)
            except Exception as e:
                if attempt >= policy.max_attempts:
                    self._logger.warning(
                        "balance_read_failed",
                        network=network,
                        account_masked=mask_address(account),
                        block_number=block_number,
                        attempts=attempt,
                        error_type=type(e).__name__,
                        error_message=str(e),
                    )
                    return _AccountRead(account=account, balance=None, retries=attempt - 1)
                delay = policy.delay_after(attempt)
                self._logger.debug(
                    "balance_read_retry",
                    network=network,
                    account_masked=mask_address(account),
                    attempt=attempt,
                    retry_delay_seconds=delay,
                    error_type=type(e).__name__,
                )
                await self._sleep(delay)
        return _AccountRead(account=account, balance=None, retries=policy.max_attempts - 1)
