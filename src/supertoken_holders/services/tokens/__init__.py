# -*- coding: utf-8 -*-
"""Super token discovery and resolution."""

from supertoken_holders.services.tokens.token_registry import RegisteredToken, TokenRegistry

__all__ = ["RegisteredToken", "TokenRegistry"]
