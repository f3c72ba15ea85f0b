"""
Configuration management for the transfer fan-out tool.

Supports configuration via environment variables and .env files.
"""

from enum import Enum
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CommitmentLevel(str, Enum):
    """Solana commitment levels, weakest first."""
    PROCESSED = "processed"
    CONFIRMED = "confirmed"
    FINALIZED = "finalized"

    @property
    def rank(self) -> int:
        return _COMMITMENT_RANK[self]


_COMMITMENT_RANK = {
    CommitmentLevel.PROCESSED: 0,
    CommitmentLevel.CONFIRMED: 1,
    CommitmentLevel.FINALIZED: 2,
}


class FanoutConfig(BaseSettings):
    """
    Configuration settings for the fan-out tool.

    All settings can be configured via environment variables with the FANOUT_ prefix.
    Values given in the transfer file or on the command line take precedence.
    """

    model_config = SettingsConfigDict(
        env_prefix="FANOUT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Endpoint settings
    rpc_url: str = Field(
        default="https://api.devnet.solana.com",
        description="JSON-RPC endpoint of the Solana node"
    )
    commitment: CommitmentLevel = Field(
        default=CommitmentLevel.CONFIRMED,
        description="Commitment level a transfer must reach to count as confirmed"
    )

    # Confirmation settings
    confirmation_timeout_seconds: int = Field(
        default=60,
        ge=1,
        description="Deadline for a submitted transaction to reach the commitment level"
    )
    poll_interval_seconds: float = Field(
        default=0.5,
        gt=0,
        description="Delay between signature status polls"
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="HTTP timeout for a single JSON-RPC call"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format"
    )


# Global config instance
_config: Optional[FanoutConfig] = None


def get_config() -> FanoutConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = FanoutConfig()
    return _config


def set_config(config: FanoutConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
