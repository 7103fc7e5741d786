"""Application settings using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Pump Match configuration from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )

    # Application
    app_name: str = Field(default="PumpMatch", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Minimum log level"
    )

    # Profile store - Supabase
    supabase_url: str = Field(description="Supabase project URL")
    supabase_key: SecretStr = Field(description="Supabase service API key")
    postgres_schema: str = Field(
        default="public", description="PostgreSQL schema holding the users table"
    )

    # On-chain data provider - Helius
    helius_api_key: SecretStr = Field(default=SecretStr(""), description="Helius API key")
    helius_api_url: str = Field(
        default="https://api.helius.xyz",
        description="Helius REST base URL (enhanced transactions)",
    )
    helius_rpc_url: str = Field(
        default="https://mainnet.helius-rpc.com",
        description="Helius JSON-RPC endpoint (balances, DAS assets, signatures)",
    )
    provider_timeout_seconds: float = Field(
        default=10.0, gt=0, description="Upper bound for a single provider call"
    )

    # Circuit Breaker
    circuit_breaker_threshold: int = Field(
        default=5, ge=1, description="Failures before circuit opens"
    )
    circuit_breaker_cooldown: int = Field(
        default=30, ge=1, description="Seconds before half-open"
    )

    # Provider paging
    tx_history_max_pages: int = Field(
        default=5, ge=1, le=50, description="Enhanced transaction pages scanned per analysis"
    )
    tx_page_limit: int = Field(
        default=100, ge=1, le=100, description="Enhanced transactions per page"
    )
    asset_page_limit: int = Field(
        default=1000, ge=1, le=1000, description="Assets fetched for token diversity"
    )
    signature_page_limit: int = Field(
        default=1000, ge=1, le=1000, description="Signatures per getSignaturesForAddress page"
    )
    wallet_age_max_pages: int = Field(
        default=10,
        ge=1,
        description="Signature pages walked for transaction count and first activity",
    )

    # Caching
    analysis_cache_ttl_seconds: int = Field(
        default=900, ge=1, description="Wallet analysis memo TTL (15 minutes)"
    )
    analysis_cache_max_size: int = Field(
        default=5000, ge=1, description="Maximum memoized analyses"
    )
    match_snapshot_ttl_seconds: int = Field(
        default=300, ge=0, description="Age under which a stored match list is reused"
    )

    # Matching
    candidate_pool_limit: int = Field(
        default=20, ge=1, le=200, description="Candidates fetched per match computation"
    )

    @field_validator("supabase_url")
    @classmethod
    def validate_supabase_url(cls, v: str) -> str:
        """Validate Supabase URL format."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Supabase URL must start with http:// or https://")
        return v

    @field_validator("helius_api_url", "helius_rpc_url")
    @classmethod
    def validate_helius_url(cls, v: str) -> str:
        """Validate Helius URL format and drop trailing slashes."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Helius URL must start with http:// or https://")
        return v.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()  # type: ignore[call-arg]  # Values from env
