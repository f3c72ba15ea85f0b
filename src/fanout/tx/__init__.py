"""
Transaction module.

Handles key loading, transaction construction and signing.
"""

from fanout.tx.builder import (
    TransactionBuildError,
    build_transfer_transaction,
    serialize_transaction,
    transaction_signature,
)
from fanout.tx.signer import load_keypair, write_keypair

__all__ = [
    "TransactionBuildError",
    "build_transfer_transaction",
    "serialize_transaction",
    "transaction_signature",
    "load_keypair",
    "write_keypair",
]
