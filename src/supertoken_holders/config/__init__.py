"""Configuration subpackage."""

from supertoken_holders.config.config import (
    ApiSettings,
    AppSettings,
    LoggingSettings,
    NetworkConfig,
    NetworkSettings,
    Settings,
    SnapshotSettings,
    TokenListSettings,
    TokenOverride,
    TokenTarget,
    get_settings,
)

__all__ = [
    "ApiSettings",
    "AppSettings",
    "LoggingSettings",
    "NetworkConfig",
    "NetworkSettings",
    "Settings",
    "SnapshotSettings",
    "TokenListSettings",
    "TokenOverride",
    "TokenTarget",
    "get_settings",
]
