# -*- coding: utf-8 -*-
"""Balance projection (flow-rate and pool accrual)."""

from supertoken_holders.services.projection.balance_projector import (
    ProjectedBalance,
    effective_net_flow_rate,
    project,
)

__all__ = ["ProjectedBalance", "effective_net_flow_rate", "project"]
