"""
Transaction Builder - constructs signed transfer transactions.
"""

import base64

import structlog

from solders.hash import Hash
from solders.system_program import TransferParams, transfer
from solders.transaction import Transaction

from fanout.core.request import ResolvedTransfer

logger = structlog.get_logger(__name__)


class TransactionBuildError(Exception):
    """Raised when transaction construction fails."""
    pass


def build_transfer_transaction(resolved: ResolvedTransfer, blockhash: str) -> Transaction:
    """
    Build and sign a System Program transfer.

    The signer pays the fee and is the only required signature.

    Args:
        resolved: Resolved transfer inputs
        blockhash: Base58 recent blockhash the transaction is anchored to

    Returns:
        Signed transaction

    Raises:
        TransactionBuildError: If the blockhash is malformed
    """
    try:
        recent_blockhash = Hash.from_string(blockhash)
    except Exception as e:
        raise TransactionBuildError(f"Invalid blockhash {blockhash!r}: {e}") from e

    instruction = transfer(
        TransferParams(
            from_pubkey=resolved.source,
            to_pubkey=resolved.destination,
            lamports=resolved.lamports,
        )
    )

    tx = Transaction.new_signed_with_payer(
        [instruction],
        resolved.source,
        [resolved.keypair],
        recent_blockhash,
    )

    logger.debug(
        "transaction_signed",
        signature=transaction_signature(tx)[:16] + "...",
        lamports=resolved.lamports,
    )
    return tx


def transaction_signature(tx: Transaction) -> str:
    """Get the fee payer signature, which identifies the transaction."""
    return str(tx.signatures[0])


def serialize_transaction(tx: Transaction) -> str:
    """Encode a signed transaction in base64 wire format for sendTransaction."""
    return base64.b64encode(bytes(tx)).decode("ascii")
