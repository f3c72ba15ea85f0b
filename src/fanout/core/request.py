"""
Transfer request models.

A TransferRequest is the declarative form read from configuration.
A ResolvedTransfer holds the concrete artifacts for one submission attempt.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping

from solders.keypair import Keypair
from solders.pubkey import Pubkey


@dataclass(frozen=True)
class TransferRequest:
    """
    A single requested transfer.

    Attributes:
        source_key_reference: Path to the signer's JSON keypair file
        destination: Base58 destination address (validated at resolution)
        amount: Amount in SOL
    """

    source_key_reference: str
    destination: str
    amount: Decimal

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TransferRequest":
        """Create a request from a transfer file entry."""
        amount = data["amount"]
        if not isinstance(amount, Decimal):
            amount = Decimal(str(amount))
        return cls(
            source_key_reference=str(data["from_keypair"]),
            destination=str(data["to"]),
            amount=amount,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for logging and serialization."""
        return {
            "from_keypair": self.source_key_reference,
            "to": self.destination,
            "amount": str(self.amount),
        }


@dataclass
class ResolvedTransfer:
    """
    Concrete inputs for building one transfer transaction.

    Owned by a single submission attempt and discarded once the
    transaction has been built.
    """

    keypair: Keypair
    destination: Pubkey
    lamports: int

    @property
    def source(self) -> Pubkey:
        """Public key of the signer paying for the transfer."""
        return self.keypair.pubkey()
