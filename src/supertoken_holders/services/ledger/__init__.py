# -*- coding: utf-8 -*-
"""Ledger pagination (subgraph -> LedgerRecord)."""

from supertoken_holders.services.ledger.ledger_pager import LedgerPager

__all__ = ["LedgerPager"]
