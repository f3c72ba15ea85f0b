"""
Endpoint descriptor shared by all submission tasks.
"""

from dataclasses import dataclass
from typing import Optional

from fanout.config import CommitmentLevel, FanoutConfig, get_config


@dataclass(frozen=True)
class Endpoint:
    """
    Read-only connection descriptor for a Solana RPC node.

    Every concurrent task builds its own client from the same Endpoint;
    the descriptor itself is never mutated.
    """

    url: str
    commitment: CommitmentLevel = CommitmentLevel.CONFIRMED
    confirmation_timeout_seconds: float = 60.0
    poll_interval_seconds: float = 0.5
    request_timeout_seconds: float = 30.0

    @classmethod
    def from_config(
        cls,
        config: Optional[FanoutConfig] = None,
        url: Optional[str] = None,
    ) -> "Endpoint":
        """
        Build an endpoint from settings.

        Args:
            config: Settings to read (global config if not provided)
            url: Overrides the configured RPC URL
        """
        config = config or get_config()
        return cls(
            url=url or config.rpc_url,
            commitment=config.commitment,
            confirmation_timeout_seconds=float(config.confirmation_timeout_seconds),
            poll_interval_seconds=config.poll_interval_seconds,
            request_timeout_seconds=config.request_timeout_seconds,
        )
