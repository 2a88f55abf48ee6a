"""Logging setup (structlog + Logfire)."""

from supertoken_holders.logging.config import configure_logging

__all__ = ["configure_logging"]
