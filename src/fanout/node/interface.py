"""
Abstract interface for Solana node integration.

Defines the contract for blockchain access that all node adapters must implement.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

import structlog

from solders.transaction import Transaction

from fanout.config import CommitmentLevel
from fanout.core.endpoint import Endpoint
from fanout.core.errors import ConfirmationTimeout, SubmissionRejected

logger = structlog.get_logger(__name__)


@dataclass
class LatestBlockhash:
    """Recent blockhash a transaction is anchored to."""
    blockhash: str
    last_valid_block_height: int


@dataclass
class SignatureStatus:
    """Status of a submitted transaction as reported by getSignatureStatuses."""
    slot: int
    confirmations: Optional[int]       # None once rooted
    err: Any                           # None if the transaction succeeded
    confirmation_status: Optional[str] # processed | confirmed | finalized

    @classmethod
    def from_rpc_item(cls, item: dict) -> "SignatureStatus":
        return cls(
            slot=int(item.get("slot", 0)),
            confirmations=item.get("confirmations"),
            err=item.get("err"),
            confirmation_status=item.get("confirmationStatus"),
        )

    def satisfies(self, commitment: CommitmentLevel) -> bool:
        """Check whether the transaction reached at least the given commitment."""
        if self.confirmation_status is None:
            # Older nodes only report a confirmation count; None means rooted
            return self.confirmations is None
        try:
            reached = CommitmentLevel(self.confirmation_status)
        except ValueError:
            return False
        return reached.rank >= commitment.rank


class NodeInterface(ABC):
    """
    Abstract interface for Solana node access.

    This interface defines all blockchain operations needed to submit a transfer:
    - Recent blockhash queries
    - Transaction submission
    - Signature status monitoring
    """

    def __init__(self, endpoint: Endpoint):
        self.endpoint = endpoint

    @abstractmethod
    async def connect(self) -> None:
        """
        Establish connection to the node.

        Raises:
            EndpointUnavailable: If connection cannot be established
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Close connection to the node."""
        pass

    @abstractmethod
    async def get_latest_blockhash(self) -> LatestBlockhash:
        """
        Get the latest blockhash at the endpoint's commitment.

        Raises:
            EndpointUnavailable: If the node cannot be queried
        """
        pass

    @abstractmethod
    async def get_block_height(self) -> int:
        """Get the current block height at the endpoint's commitment."""
        pass

    @abstractmethod
    async def send_transaction(self, tx: Transaction) -> str:
        """
        Submit a signed transaction to the network.

        Args:
            tx: Signed transaction to submit

        Returns:
            Transaction signature

        Raises:
            SubmissionRejected: If the node refuses the transaction
            EndpointUnavailable: If the node cannot be reached
        """
        pass

    @abstractmethod
    async def get_signature_status(self, signature: str) -> Optional[SignatureStatus]:
        """
        Get the status of a submitted transaction.

        Returns:
            The status, or None if the node has not seen the signature yet
        """
        pass

    async def send_and_confirm_transaction(
        self,
        tx: Transaction,
        last_valid_block_height: Optional[int] = None,
    ) -> str:
        """
        Submit a transaction and wait until it reaches the endpoint's commitment.

        The wait ends when the commitment is reached, the ledger reports an
        error, the blockhash expires, or the endpoint's confirmation deadline
        passes.

        Args:
            tx: Signed transaction to submit
            last_valid_block_height: Block height after which the blockhash expires

        Returns:
            Transaction signature

        Raises:
            SubmissionRejected: If the transaction failed on-chain
            ConfirmationTimeout: If the commitment was not reached in time
        """
        signature = await self.send_transaction(tx)
        commitment = self.endpoint.commitment

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.endpoint.confirmation_timeout_seconds

        while True:
            status = await self.get_signature_status(signature)

            if status is not None:
                if status.err is not None:
                    logger.warning("tx_failed_on_chain", signature=signature, err=status.err)
                    raise SubmissionRejected(
                        f"Transaction {signature} failed: {status.err}",
                        data=status.err,
                    )
                if status.satisfies(commitment):
                    logger.info(
                        "tx_confirmed",
                        signature=signature,
                        slot=status.slot,
                        commitment=commitment.value,
                    )
                    return signature
            elif last_valid_block_height is not None:
                block_height = await self.get_block_height()
                if block_height > last_valid_block_height:
                    logger.warning("tx_blockhash_expired", signature=signature)
                    raise ConfirmationTimeout(
                        f"Blockhash expired before transaction {signature} "
                        f"reached {commitment.value} commitment"
                    )

            if loop.time() >= deadline:
                logger.warning("tx_confirmation_timeout", signature=signature)
                raise ConfirmationTimeout(
                    f"Transaction {signature} did not reach {commitment.value} commitment "
                    f"within {self.endpoint.confirmation_timeout_seconds:g}s"
                )

            await asyncio.sleep(self.endpoint.poll_interval_seconds)
