# -*- coding: utf-8 -*-
"""On-chain balance verification pinned to one block."""

from supertoken_holders.services.verification.retry_policy import RetryPolicy
from supertoken_holders.services.verification.verifier import (
    BatchStats,
    RpcBalanceVerifier,
    VerificationResult,
)

__all__ = ["BatchStats", "RetryPolicy", "RpcBalanceVerifier", "VerificationResult"]
