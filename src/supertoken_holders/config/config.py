# -*- coding: utf-8 -*-
"""Configuration loaded from environment via Pydantic Settings.

Nested env vars use <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, SNAPSHOT__RPC_BATCH_SIZE.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Literal, Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True, slots=True)
class NetworkConfig:
    """A configured chain: network name (subgraph/RPC slug) and numeric chain id."""

    name: str
    chain_id: int


@dataclass(frozen=True, slots=True)
class TokenTarget:
    """A (network, token) pair the scheduler snapshots."""

    network: str
    token_address: str


@dataclass(frozen=True, slots=True)
class TokenOverride:
    """A token added to the token list by hand (chain_id:address:symbol)."""

    chain_id: int
    address: str
    symbol: str


def _split_entries(raw: str) -> list[str]:
    if not raw or not raw.strip():
        return []
    return [s.strip() for s in raw.split(",") if s.strip()]


class AppSettings(BaseSettings):
    """General application configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    app_name: str = "supertoken-holders"
    service_name: Optional[str] = None
    service_version: Optional[str] = None
    environment: Literal["development", "test", "production"] = "development"


class LoggingSettings(BaseSettings):
    """Structured logging configuration for structlog/stdlib/Logfire."""

    model_config = SettingsConfigDict(extra="ignore")

    console_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    logfire_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    log_to_console: bool = True
    log_to_file: bool = False
    log_file_path: str = "logs/supertoken_holders.log"
    # TimedRotatingFileHandler: when to rotate (S/M/H/D/W0-W6/midnight), interval, backups to keep
    log_file_when: Literal[
        "S", "M", "H", "D", "W0", "W1", "W2", "W3", "W4", "W5", "W6", "midnight"
    ] = "midnight"
    log_file_interval: int = 1
    log_file_backup_count: int = 30
    log_file_utc: bool = True

    # Main output format: JSONRenderer if True, ConsoleRenderer if False
    json_format: bool = False

    logfire_enabled: bool = False
    logfire_token: Optional[str] = None


class ApiSettings(BaseSettings):
    """HTTP transport configuration shared by the subgraph, RPC and token list clients."""

    model_config = SettingsConfigDict(extra="ignore")

    timeout_seconds: float = Field(
        default=30.0,
        ge=1.0,
        le=300.0,
        description="HTTP request timeout in seconds.",
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Transport-level attempts per HTTP request.",
    )


class NetworkSettings(BaseSettings):
    """Chains to serve and where their subgraph and RPC endpoints live (env NETWORKS__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    # Raw string so pydantic-settings does not try to JSON-decode it.
    networks_raw: str = Field(
        default="base-mainnet:8453",
        description="Comma-separated network:chain_id pairs. Env: NETWORKS__NETWORKS.",
        validation_alias="networks",
    )
    subgraph_url_template: str = Field(
        default="https://subgraph-endpoints.superfluid.dev/{network}/protocol-v1",
        description="Ledger (subgraph) endpoint; {network} is replaced by the network name.",
    )
    rpc_url_template: str = Field(
        default="https://rpc-endpoints.superfluid.dev/{network}",
        description="JSON-RPC endpoint; {network} is replaced by the network name.",
    )

    @computed_field
    @property
    def networks(self) -> list[NetworkConfig]:
        """Parse networks_raw into NetworkConfig entries (invalid entries are skipped)."""
        result: list[NetworkConfig] = []
        for entry in _split_entries(self.networks_raw):
            name, _, chain_id = entry.partition(":")
            if not name.strip() or not chain_id.strip().isdigit():
                continue
            result.append(NetworkConfig(name=name.strip(), chain_id=int(chain_id)))
        return result

    def network_by_name(self, name: str) -> NetworkConfig | None:
        for network in self.networks:
            if network.name == name:
                return network
        return None

    def network_by_chain_id(self, chain_id: int) -> NetworkConfig | None:
        for network in self.networks:
            if network.chain_id == chain_id:
                return network
        return None

    def subgraph_url(self, network: str) -> str:
        return self.subgraph_url_template.format(network=network)

    def rpc_url(self, network: str) -> str:
        return self.rpc_url_template.format(network=network)


class SnapshotSettings(BaseSettings):
    """Snapshot pipeline configuration (env SNAPSHOT__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    tokens_raw: str = Field(
        default="",
        description="Comma-separated network:token_address pairs. Env: SNAPSHOT__TOKENS.",
        validation_alias="tokens",
    )
    interval_seconds: float = Field(
        default=3600.0,
        ge=10.0,
        description="Seconds between scheduled snapshot passes.",
    )
    page_size: int = Field(default=1000, ge=1, le=1000, description="Ledger page size.")
    pool_memberships_limit: int = Field(
        default=256,
        ge=1,
        le=1000,
        description="Max pool memberships fetched per account.",
    )
    rpc_batch_size: int = Field(default=100, ge=1, le=1000)
    rpc_max_attempts: int = Field(default=3, ge=1, le=10)
    rpc_base_delay_seconds: float = Field(default=1.0, ge=0.0, le=60.0)
    rpc_backoff_multiplier: float = Field(default=2.0, ge=1.0, le=10.0)
    max_in_flight_rpc: int = Field(
        default=100,
        ge=1,
        le=2000,
        description="Ceiling on concurrent balance reads across all running snapshots.",
    )
    max_concurrent_jobs: int = Field(default=4, ge=1, le=64)
    verify_all_accounts: bool = Field(
        default=False,
        description="Verify every account on-chain instead of trusting idle ledger balances.",
    )
    data_dir: str = Field(default="data", description="Directory for durable snapshot files.")

    @computed_field
    @property
    def tokens(self) -> list[TokenTarget]:
        """Parse tokens_raw into TokenTarget entries (address lowercased)."""
        result: list[TokenTarget] = []
        for entry in _split_entries(self.tokens_raw):
            network, _, address = entry.partition(":")
            if not network.strip() or not address.strip():
                continue
            result.append(
                TokenTarget(network=network.strip(), token_address=address.strip().lower())
            )
        return result


class TokenListSettings(BaseSettings):
    """Super token list discovery (env TOKEN_LIST__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = False
    url: str = "https://tokenlist.superfluid.org/superfluid.extended.tokenlist.json"
    cache_ttl_seconds: float = Field(default=3600.0, ge=1.0)
    skip_tokens_raw: str = Field(
        default="",
        description="Comma-separated chain_id:SYMBOL pairs to ignore. Env: TOKEN_LIST__SKIP_TOKENS.",
        validation_alias="skip_tokens",
    )
    overrides_raw: str = Field(
        default="",
        description="Comma-separated chain_id:address:SYMBOL extras. Env: TOKEN_LIST__OVERRIDES.",
        validation_alias="overrides",
    )

    @computed_field
    @property
    def skip_tokens(self) -> set[str]:
        result: set[str] = set()
        for entry in _split_entries(self.skip_tokens_raw):
            chain_id, _, symbol = entry.partition(":")
            if chain_id.strip() and symbol.strip():
                result.add(f"{chain_id.strip()}:{symbol.strip()}")
        return result

    @computed_field
    @property
    def overrides(self) -> list[TokenOverride]:
        result: list[TokenOverride] = []
        for entry in _split_entries(self.overrides_raw):
            parts = [p.strip() for p in entry.split(":")]
            if len(parts) != 3 or not parts[0].isdigit():
                continue
            result.append(
                TokenOverride(chain_id=int(parts[0]), address=parts[1].lower(), symbol=parts[2])
            )
        return result


class Settings(BaseSettings):
    """Root application configuration.

    Groups all sub-configurations so the rest of the code does not
    read environment variables directly. Nested overrides use
    <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, SNAPSHOT__INTERVAL_SECONDS.
    """

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)
    networks: NetworkSettings = Field(default_factory=NetworkSettings)
    snapshot: SnapshotSettings = Field(default_factory=SnapshotSettings)
    token_list: TokenListSettings = Field(default_factory=TokenListSettings)

    @classmethod
    def from_env(cls, **overrides: Any) -> Settings:
        """Build settings from environment (and .env), with optional overrides.

        Nested overrides can be passed as flat keys or nested dicts, e.g.:
        - from_env(snapshot__rpc_batch_size=50)
        - from_env(snapshot={"rpc_batch_size": 50})

        Returns:
            A new Settings instance.
        """
        return cls(**overrides)


@lru_cache
def get_settings() -> Settings:
    """Return a single cached instance of Settings.

    Typical usage:

        from supertoken_holders.config import get_settings

        settings = get_settings()
        batch_size = settings.snapshot.rpc_batch_size
    """
    return Settings()
