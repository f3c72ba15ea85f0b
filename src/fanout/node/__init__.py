"""
Node Integration Layer.

Provides abstracted access to a Solana node for blockhash queries,
transaction submission and confirmation tracking.
"""

from fanout.node.interface import LatestBlockhash, NodeInterface, SignatureStatus
from fanout.node.rpc import SolanaRpcAdapter

__all__ = [
    "LatestBlockhash",
    "NodeInterface",
    "SignatureStatus",
    "SolanaRpcAdapter",
]
